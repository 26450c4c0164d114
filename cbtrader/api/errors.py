"""Exception types raised by the cbtrader API layer."""


class CbTraderError(Exception):
    """Base class for all cbtrader errors."""


class ConfigError(CbTraderError):
    """Required configuration (credentials, bank ID) is missing or unreadable."""


class CredentialError(CbTraderError):
    """Credentials are present but cannot be used to sign a request."""


class ClockError(CbTraderError):
    """The wall clock reports a time before the Unix epoch."""


class InvalidRangeError(CbTraderError, ValueError):
    """A requested time range is empty, reversed or unparseable."""


class InvalidGranularityError(CbTraderError, ValueError):
    """Candle granularity is not a positive whole number of seconds."""


class TransportError(CbTraderError):
    """The HTTP request itself failed (network, timeout, HTTP status)."""


class DecodeError(CbTraderError):
    """A response body did not match any known shape."""


class ExchangeApiError(CbTraderError):
    """The exchange answered with an error payload.

    Attributes:
        message: The exchange's error message, verbatim.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
