"""Process-wide catalog rate limiting."""

import asyncio
import time

from loguru import logger


class RateLimiter:
    """Serializes catalog calls and spaces them by at least ``delay`` seconds.

    One limiter is meant to be shared by every client in the process, so
    concurrent syncs queue behind each other instead of fanning out. The lock
    is rebuilt when the running loop changes.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._last_call: float | None = None
        self._lock: asyncio.Lock | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._loop is not loop:
            self._lock = asyncio.Lock()
            self._loop = loop
        return self._lock

    async def wait(self) -> None:
        """Sleep until ``delay`` has passed since the previous call."""
        if self._last_call is None:
            return
        wait = self._last_call + self.delay - time.monotonic()
        if wait > 0:
            logger.debug("Rate limit: waiting {:.1f}s", wait)
            await asyncio.sleep(wait)

    def mark(self) -> None:
        self._last_call = time.monotonic()


_shared: dict[float, RateLimiter] = {}


def shared_limiter(delay: float) -> RateLimiter:
    """The process-wide limiter for ``delay``."""
    if delay not in _shared:
        _shared[delay] = RateLimiter(delay)
    return _shared[delay]
