"""Candle (OHLCV) data model."""

from typing import Sequence

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents a single OHLCV candle.

    The exchange sends candles as 6-element arrays in the order
    ``[time, low, high, open, close, volume]``.
    """

    time: int = Field(..., description="Bucket start time, seconds since the Unix epoch")
    low: float = Field(..., ge=0, description="Lowest price during the bucket")
    high: float = Field(..., ge=0, description="Highest price during the bucket")
    open: float = Field(..., ge=0, description="Opening price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Traded volume")

    model_config = {"frozen": True}

    @classmethod
    def from_row(cls, row: Sequence) -> "Candle":
        """Build a candle from an exchange array.

        Raises:
            ValueError: If the row does not have exactly six entries.
        """
        if len(row) != 6:
            raise ValueError(f"Candle row must have 6 entries, got {len(row)}")
        time, low, high, open_, close, volume = row
        return cls(time=time, low=low, high=high, open=open_, close=close, volume=volume)

    def as_row(self) -> tuple[int, float, float, float, float, float]:
        """Return the candle in exchange column order."""
        return (self.time, self.low, self.high, self.open, self.close, self.volume)
