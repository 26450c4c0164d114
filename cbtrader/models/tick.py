"""Tick (ticker snapshot) data model."""

from datetime import datetime

from pydantic import BaseModel, Field


class Tick(BaseModel):
    """Latest trade and best bid/ask for a product."""

    trade_id: int = Field(..., description="ID of the last trade")
    price: float = Field(..., ge=0, description="Last trade price")
    size: float = Field(..., ge=0, description="Last trade size")
    bid: float = Field(..., ge=0, description="Best bid")
    ask: float = Field(..., ge=0, description="Best ask")
    volume: float = Field(..., ge=0, description="24h volume")
    time: datetime = Field(..., description="Time of the last trade")

    model_config = {"frozen": True}
