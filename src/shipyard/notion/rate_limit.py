"""Fixed-delay rate limiting for serialized Notion traffic."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from shipyard.config import DEFAULT_RATE_LIMIT_DELAY

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RateLimiter:
    """Waits a fixed delay between consecutive remote calls.

    Callers await ``wait()`` after a page that has more results and after
    every successful mutation, so requests stay at least ``delay`` apart.
    """

    def __init__(self, delay: float = DEFAULT_RATE_LIMIT_DELAY, sleep: Sleep | None = None) -> None:
        self.delay = delay
        self._sleep = sleep or asyncio.sleep

    async def wait(self) -> None:
        if self.delay <= 0:
            return
        logger.debug("Rate limit: sleeping %.3fs", self.delay)
        await self._sleep(self.delay)
