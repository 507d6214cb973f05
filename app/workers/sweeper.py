"""Periodic sweep task with explicit start/stop lifecycle."""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from loguru import logger


class PeriodicSweeper:
    """Runs ``sweep`` once at start and then every ``interval`` seconds."""

    def __init__(self, name: str, sweep: Callable[[], Awaitable[Any]], interval: float):
        self.name = name
        self._sweep = sweep
        self._interval = interval
        self._task: asyncio.Task | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=f"{self.name}-sweeper")
        logger.info("Sweeper {} started (every {}s)", self.name, self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Sweeper {} stopped", self.name)

    async def run_once(self) -> Any:
        """One sweep pass. Failures are logged and yield None."""
        self.runs += 1
        try:
            return await self._sweep()
        except Exception:
            logger.exception("Sweeper {} failed", self.name)
            return None

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)
