"""Time-window planning for historical candle requests.

The candles endpoint returns at most ``MAX_CANDLES_PER_REQUEST`` candles per
call, so a long range is split into fixed-size windows of
``granularity * MAX_CANDLES_PER_REQUEST`` seconds.
"""

from datetime import datetime, timedelta
from typing import Union

from pydantic import BaseModel, Field, model_validator

from cbtrader.api.errors import InvalidGranularityError, InvalidRangeError


MAX_CANDLES_PER_REQUEST = 300


class TimeWindow(BaseModel):
    """A half-open ``[start, end)`` time range for one request."""

    start: datetime = Field(..., description="Inclusive window start")
    end: datetime = Field(..., description="Exclusive window end")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.end <= self.start:
            raise ValueError("window end must be after its start")
        return self

    @property
    def seconds(self) -> int:
        """Length of the window in whole seconds."""
        return int((self.end - self.start).total_seconds())


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse an RFC 3339 / ISO 8601 timestamp with a UTC offset.

    Raises:
        InvalidRangeError: If the value cannot be parsed or has no offset.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        # fromisoformat only understands a trailing "Z" from Python 3.11 on.
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidRangeError(f"'{value}' is not an RFC 3339 timestamp") from None

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise InvalidRangeError(f"'{value}' has no UTC offset (e.g. 2020-01-01T00:00:00-04:00)")
    return parsed


def parse_granularity(value: Union[int, str]) -> int:
    """Validate a granularity given as an int or a numeric string.

    Raises:
        InvalidGranularityError: If the value is not a positive integer.
    """
    if isinstance(value, bool):
        raise InvalidGranularityError(f"'{value}' is not a valid granularity")
    if isinstance(value, int):
        seconds = value
    else:
        try:
            seconds = int(str(value).strip())
        except ValueError:
            raise InvalidGranularityError(
                f"'{value}' is not a valid granularity; expected whole seconds"
            ) from None

    if seconds <= 0:
        raise InvalidGranularityError(f"Granularity must be positive, got {seconds}")
    return seconds


def count_windows(
    start: datetime,
    end: datetime,
    granularity: int,
    max_candles: int = MAX_CANDLES_PER_REQUEST,
) -> int:
    """Number of requests needed to cover ``[start, end)``.

    Computed as ``total // span + 1``. When the range is an exact multiple of
    the window span this includes one extra trailing window.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
        InvalidGranularityError: If granularity is not positive.
    """
    granularity = parse_granularity(granularity)
    if max_candles <= 0:
        raise ValueError(f"max_candles must be positive, got {max_candles}")
    if end <= start:
        raise InvalidRangeError(f"End {end.isoformat()} is not after start {start.isoformat()}")

    total_seconds = int((end - start).total_seconds())
    span = granularity * max_candles
    return total_seconds // span + 1


def plan(
    start: Union[str, datetime],
    end: Union[str, datetime],
    granularity: Union[int, str],
    max_candles: int = MAX_CANDLES_PER_REQUEST,
) -> list[TimeWindow]:
    """Split ``[start, end)`` into contiguous request windows.

    Args:
        start: Range start.
        end: Range end.
        granularity: Candle size in seconds.
        max_candles: Maximum candles the exchange returns per request.

    Returns:
        Windows of exactly ``granularity * max_candles`` seconds starting at
        ``start``. The last one may extend past ``end``.

    Raises:
        InvalidRangeError: If the range is empty, reversed or unparseable.
        InvalidGranularityError: If granularity is not a positive integer.
    """
    start_at = parse_instant(start)
    end_at = parse_instant(end)
    seconds = parse_granularity(granularity)

    count = count_windows(start_at, end_at, seconds, max_candles)
    span = timedelta(seconds=seconds * max_candles)

    return [
        TimeWindow(start=start_at + span * i, end=start_at + span * (i + 1))
        for i in range(count)
    ]
