"""cbtrader - command-line client for the Coinbase Pro REST API."""

__version__ = "0.1.0"
