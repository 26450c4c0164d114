"""CSV export of candle streams."""

import csv
from decimal import Decimal
from typing import Iterable, TextIO

from cbtrader.models import Candle

CSV_HEADER = ("time", "low", "high", "open", "close", "volume")


def format_number(value: float) -> str:
    """Render a number in plain decimal notation without a trailing ``.0``."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return str(value)


def write_candles_csv(candles: Iterable[Candle], stream: TextIO) -> int:
    """Write candles as CSV, flushing after every row.

    The header is written and flushed before the first candle is pulled, so
    a consumer sees it even if the fetch fails on the first request.

    Returns:
        Number of candle rows written.
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    stream.flush()

    count = 0
    for candle in candles:
        writer.writerow([format_number(v) for v in candle.as_row()])
        stream.flush()
        count += 1
    return count
