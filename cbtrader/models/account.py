"""Account data model."""

from typing import Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    """A single currency account (wallet) on the exchange."""

    id: str = Field(..., description="Account ID")
    currency: str = Field(..., min_length=1, description="Currency code (e.g., BTC)")
    balance: float = Field(..., description="Total funds in the account")
    available: float = Field(..., description="Funds available for trading")
    hold: float = Field(..., ge=0, description="Funds on hold for open orders")
    profile_id: Optional[str] = Field(default=None, description="Owning profile ID")
    trading_enabled: Optional[bool] = Field(default=None, description="Trading flag")

    model_config = {"frozen": True}
