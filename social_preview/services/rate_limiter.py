"""Per-client sliding-window rate limiting."""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Gate consulted before every extraction request."""

    def allow(self, client_id: str) -> bool: ...

    def sweep(self) -> int: ...


class SlidingWindowRateLimiter:
    """In-process limiter keeping recent request timestamps per client."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits: dict[str, deque[float]] = {}

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def allow(self, client_id: str) -> bool:
        """Record a request for ``client_id`` unless its window is full."""
        now = self.clock()
        hits = self._hits.setdefault(client_id, deque())
        self._prune(hits, now)

        if len(hits) >= self.max_requests:
            return False

        hits.append(now)
        return True

    def sweep(self) -> int:
        """Drop expired timestamps everywhere; return how many clients were evicted."""
        now = self.clock()
        evicted = 0
        for client_id in list(self._hits):
            hits = self._hits[client_id]
            self._prune(hits, now)
            if not hits:
                del self._hits[client_id]
                evicted += 1
        return evicted

    def __len__(self) -> int:
        return len(self._hits)


async def sweep_periodically(limiter: RateLimiter, interval: float) -> None:
    """Call ``limiter.sweep()`` every ``interval`` seconds until cancelled."""
    logger.info(f"Rate limiter sweeper started (every {interval}s)")
    try:
        while True:
            await asyncio.sleep(interval)
            evicted = limiter.sweep()
            logger.debug(f"Rate limiter sweep evicted {evicted} clients")
    finally:
        logger.info("Rate limiter sweeper stopped")
