"""Coinbase Pro REST API layer for cbtrader."""

from cbtrader.api.client import CoinbaseProClient
from cbtrader.api.decoder import ApiError, ApiResponse, decode, expect
from cbtrader.api.errors import (
    CbTraderError,
    ClockError,
    ConfigError,
    CredentialError,
    DecodeError,
    ExchangeApiError,
    InvalidGranularityError,
    InvalidRangeError,
    TransportError,
)
from cbtrader.api.planner import TimeWindow, plan
from cbtrader.api.sequencer import RateLimiter, fetch_history
from cbtrader.api.signer import RequestSigner, sign
from cbtrader.api.transport import Transport

__all__ = [
    "ApiError",
    "ApiResponse",
    "CbTraderError",
    "ClockError",
    "CoinbaseProClient",
    "ConfigError",
    "CredentialError",
    "DecodeError",
    "ExchangeApiError",
    "InvalidGranularityError",
    "InvalidRangeError",
    "RateLimiter",
    "RequestSigner",
    "TimeWindow",
    "Transport",
    "TransportError",
    "decode",
    "expect",
    "fetch_history",
    "plan",
    "sign",
]
