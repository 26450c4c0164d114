"""MarketOrder and Order data models."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


CENT = Decimal("0.01")


def to_cents(amount: Union[str, float, Decimal]) -> Decimal:
    """Round a quote-currency amount to whole cents.

    The rounded value is what gets validated and sent, so an amount that
    rounds to ``0.00`` is rejected instead of going out as a zero order.

    Raises:
        ValueError: If the amount is not a number or is below one cent
            after rounding.
    """
    try:
        cents = Decimal(str(amount).strip()).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"'{amount}' is not a valid amount") from None
    if not cents.is_finite() or cents < CENT:
        raise ValueError(f"Amount must be at least {CENT}, got '{amount}'")
    return cents


class MarketOrder(BaseModel):
    """A market order to be placed, sized in quote currency funds."""

    product_id: str = Field(..., min_length=3, description="Product (e.g., BTC-USD)")
    side: Literal["buy", "sell"] = Field(default="buy", description="Order side")
    funds: Decimal = Field(..., description="Quote currency to spend, in whole cents")
    type: Literal["market"] = Field(default="market", description="Order type")

    model_config = {"frozen": True}

    @field_validator("funds", mode="before")
    @classmethod
    def _round_funds(cls, value):
        return to_cents(value)

    def to_payload(self) -> dict:
        """Request body for ``POST /orders``."""
        return {
            "type": self.type,
            "side": self.side,
            "product_id": self.product_id,
            "funds": str(self.funds),
        }


class Order(BaseModel):
    """An order as reported by the exchange."""

    id: str = Field(..., description="Unique order identifier")
    product_id: str = Field(..., description="Product (e.g., BTC-USD)")
    side: str = Field(..., description="buy or sell")
    type: str = Field(..., description="Order type (market, limit, stop)")
    status: str = Field(..., description="Order status (pending, open, done, ...)")
    created_at: datetime = Field(..., description="Order creation time")
    price: Optional[float] = Field(default=None, ge=0, description="Limit price")
    size: Optional[float] = Field(default=None, ge=0, description="Base currency size")
    funds: Optional[float] = Field(default=None, ge=0, description="Quote currency funds")
    specified_funds: Optional[float] = Field(default=None, ge=0, description="Requested funds")
    fill_fees: Optional[float] = Field(default=None, ge=0, description="Fees paid so far")
    filled_size: Optional[float] = Field(default=None, ge=0, description="Filled base size")
    executed_value: Optional[float] = Field(default=None, ge=0, description="Filled quote value")
    settled: Optional[bool] = Field(default=None, description="Whether the order has settled")

    model_config = {"frozen": True}
