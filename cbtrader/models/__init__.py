"""Data models for cbtrader."""

from cbtrader.models.account import Account
from cbtrader.models.candle import Candle
from cbtrader.models.credentials import Credentials
from cbtrader.models.deposit import DepositReceipt, PaymentMethod
from cbtrader.models.order import MarketOrder, Order, to_cents
from cbtrader.models.tick import Tick

__all__ = [
    "Account",
    "Candle",
    "Credentials",
    "DepositReceipt",
    "MarketOrder",
    "Order",
    "PaymentMethod",
    "Tick",
    "to_cents",
]
