"""CLI commands for cbtrader.

This package provides the command-line interface for cbtrader,
including market data, history export, account and trading commands.
"""

from cbtrader.cli.main import cli, main

__all__ = ["cli", "main"]
