"""Rate-limited, strictly sequential history fetching.

The exchange limits each credential to roughly one request per second, so
windows are fetched one at a time with a blocking delay in between. Results
come back as a generator: candles are handed to the caller as soon as their
page arrives, and a caller that stops iterating stops further requests.
"""

import logging
import time
from typing import Callable, Iterable, Iterator, Optional, Protocol

from cbtrader.api.decoder import ApiResponse, Candles, expect
from cbtrader.api.planner import TimeWindow
from cbtrader.models import Candle

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_INTERVAL = 1.0


class CandleSource(Protocol):
    """The part of the transport the sequencer needs."""

    def get(
        self,
        path: str,
        params: Optional[dict] = None,
        auth: bool = False,
        prefer: Optional[type] = None,
    ) -> ApiResponse: ...


class RateLimiter:
    """Enforces a minimum interval between consecutive requests.

    Both the clock and the sleep function are injectable so tests can run
    without real waiting.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_issue: Optional[float] = None

    def wait(self) -> float:
        """Block until the next request may go out, then mark it issued.

        Returns:
            Seconds spent sleeping.
        """
        now = self._clock()
        waited = 0.0

        if self._last_issue is not None:
            ready_at = self._last_issue + self.min_interval
            # sleep() may return early; only the clock decides.
            while now < ready_at:
                pause = ready_at - now
                logger.debug("Rate limit: sleeping %.3fs", pause)
                self._sleep(pause)
                waited += pause
                now = self._clock()

        self._last_issue = now
        return waited


def candles_path(product_id: str) -> str:
    """Path of the candles endpoint for a product."""
    return f"/products/{product_id}/candles"


def fetch_history(
    transport: CandleSource,
    product_id: str,
    windows: Iterable[TimeWindow],
    granularity: int,
    limiter: Optional[RateLimiter] = None,
) -> Iterator[Candle]:
    """Fetch candles for each window in order, yielding them as they arrive.

    Args:
        transport: Transport used for the unauthenticated candles call.
        product_id: Product to fetch (e.g., BTC-USD).
        windows: Windows from the planner, fetched in the given order.
        granularity: Candle size in seconds.
        limiter: Rate limiter; a one-second limiter is used when omitted.

    Yields:
        Candles in page order, pages in window order.

    Raises:
        ExchangeApiError: If the exchange returns an error for a window.
        DecodeError: If a window's response is not a candle list.
        TransportError: If a request fails.
    """
    limiter = limiter or RateLimiter()
    path = candles_path(product_id)
    total = 0

    for index, window in enumerate(windows, start=1):
        limiter.wait()
        logger.debug(
            "Window %d: %s to %s",
            index,
            window.start.isoformat(),
            window.end.isoformat(),
        )

        response = transport.get(
            path,
            params={
                "start": window.start.isoformat(),
                "end": window.end.isoformat(),
                "granularity": granularity,
            },
            prefer=Candles,
        )
        page = expect(response, Candles)
        total += len(page.candles)
        logger.info("Window %d returned %d candles (%d total)", index, len(page.candles), total)

        yield from page.candles
