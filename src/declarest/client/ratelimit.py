"""Sliding-window request rate limiter for the default transport.

:class:`RateLimiter` admits at most ``max_requests`` dispatches in any
``period`` seconds.  Callers beyond that ceiling wait inside
:meth:`RateLimiter.acquire`, queued in arrival order behind an
:class:`asyncio.Lock`, until the oldest admission leaves the window.

Example::

    limiter = RateLimiter.from_config(RateLimitConfig(max_rps=5))

    async with limiter:
        response = await client.request(...)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable

from declarest.models import RateLimitConfig

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most *max_requests* calls per *period* seconds.

    Args:
        max_requests: Number of admissions allowed inside one window.
        period: Window length in seconds.
        clock: Monotonic clock; injectable for tests.
        sleep: Coroutine function used to wait; injectable for tests.
    """

    def __init__(
        self,
        max_requests: int,
        period: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_requests <= 0 or period <= 0:
            raise ValueError("max_requests and period must be positive")
        self.max_requests = max_requests
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._admitted: deque[float] = deque()
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: RateLimitConfig) -> RateLimiter:
        max_requests, period = config.window()
        return cls(max_requests, period)

    def _evict(self, now: float) -> None:
        while self._admitted and now - self._admitted[0] >= self.period:
            self._admitted.popleft()

    async def acquire(self) -> None:
        """Wait until a request may start, then record its admission."""
        async with self._lock:
            while True:
                now = self._clock()
                self._evict(now)
                if len(self._admitted) < self.max_requests:
                    self._admitted.append(now)
                    return
                delay = self.period - (now - self._admitted[0])
                logger.debug("rate limit reached, waiting %.3fs", delay)
                await self._sleep(delay)

    async def __aenter__(self) -> RateLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None
