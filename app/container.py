"""Dependency Injection container - initialized at app startup."""

import time
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from app.repositories import EventStore, KeyedFileCache, MemoryCache
from app.services import CollectionService, EventService, VoteAggregator
from app.workers import PeriodicSweeper, TaskQueue
from bgg_client import CatalogClient
from etl import CollectionSyncEngine
from settings import (
    CACHE_DIR,
    CACHE_TTL,
    CLEANUP_INTERVAL,
    EVENT_CLEANUP_INTERVAL,
    EVENT_MAX_AGE,
    EVENTS_DIR,
    MAX_CACHE_AGE,
    MAX_CACHE_SIZE,
)


def filesystem_writable(path: Path) -> bool:
    """Create ``path`` and write/delete a scratch file in it."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        scratch = path / ".write-test"
        scratch.write_text("test")
        scratch.unlink()
        return True
    except OSError as e:
        logger.warning("Filesystem cache unavailable at {} ({})", path, e)
        return False


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(
        self,
        cache_dir: Path | str = CACHE_DIR,
        events_dir: Path | str = EVENTS_DIR,
        client_factory: Callable[[], CatalogClient] = CatalogClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        cache_dir, events_dir = Path(cache_dir), Path(events_dir)

        # Repositories
        if filesystem_writable(cache_dir):
            self.cache = KeyedFileCache(
                cache_dir,
                max_size=MAX_CACHE_SIZE,
                default_ttl=CACHE_TTL,
                max_age=MAX_CACHE_AGE,
                queue=TaskQueue("cache-eviction"),
                clock=clock,
            )
            logger.info("Filesystem cache enabled at: {}", cache_dir)
        else:
            self.cache = MemoryCache(default_ttl=CACHE_TTL, clock=clock)

        self.event_store = EventStore(events_dir, max_age=EVENT_MAX_AGE, clock=clock)
        try:
            self.event_store.ensure_dir()
        except OSError as e:
            logger.error("Events directory unavailable at {}: {}", events_dir, e)

        # Services
        self.sync_engine = CollectionSyncEngine(self.cache, client_factory=client_factory)
        self.collections = CollectionService(self.cache, self.sync_engine)
        self.events = EventService(self.event_store, VoteAggregator())

        # Background sweeps
        self.cache_sweeper = PeriodicSweeper("cache", self.cache.sweep, CLEANUP_INTERVAL)
        self.event_sweeper = PeriodicSweeper("events", self.event_store.sweep, EVENT_CLEANUP_INTERVAL)

        self._initialized = True

    async def start(self) -> None:
        """Start both sweepers; each runs one pass immediately."""
        self.cache_sweeper.start()
        self.event_sweeper.start()
        stats = await self.cache.stats()
        logger.info("Cache stats: {} files, {} bytes", stats.count, stats.total_size)

    async def stop(self) -> None:
        await self.cache_sweeper.stop()
        await self.event_sweeper.stop()
        await self.cache.close()

    def reset(self) -> None:
        """Forget all instances so ``init`` can run again."""
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized


# Global container instance
container = Container()
