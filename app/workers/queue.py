"""Background task queue - one asyncio worker draining coroutine factories."""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from loguru import logger

TaskFactory = Callable[[], Awaitable[Any]]


class TaskQueue:
    """Fire-and-forget work that callers don't await, but tests can.

    The worker is created lazily inside the running loop on first submit.
    """

    def __init__(self, name: str = "tasks"):
        self._name = name
        self._queue: asyncio.Queue[TaskFactory] | None = None
        self._worker: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _ensure_worker(self) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        if self._worker is None or self._worker.done() or self._loop is not loop:
            self._queue = asyncio.Queue()
            self._loop = loop
            self._worker = loop.create_task(self._run(), name=f"{self._name}-worker")
            logger.debug("TaskQueue {}: worker started", self._name)
        return self._queue

    def submit(self, factory: TaskFactory) -> None:
        """Enqueue work; returns immediately."""
        self._ensure_worker().put_nowait(factory)

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def _run(self) -> None:
        while True:
            factory = await self._queue.get()
            try:
                await factory()
            except Exception:
                logger.exception("TaskQueue {}: task failed", self._name)
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until everything submitted so far has run."""
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def close(self) -> None:
        """Cancel the worker; queued work is dropped."""
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
        self._worker = None
        self._queue = None
        self._loop = None
