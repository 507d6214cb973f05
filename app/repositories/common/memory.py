"""In-memory fallback cache, used when the cache directory is unwritable."""

import json
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

from app.models.common import CacheEntry, CacheMetadata, CacheStats, SweepResult
from app.repositories.common.cache import KeyedFileCache
from settings import CACHE_TTL


class MemoryCache:
    """Same async interface as KeyedFileCache, held in a dict.

    Degraded mode: TTL is honored on read and by ``sweep``, there is no size
    eviction and nothing survives the process.
    """

    backend = "memory"

    def __init__(self, default_ttl: float = CACHE_TTL, clock: Callable[[], float] = time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        logger.warning("MemoryCache in use - entries are lost on restart")

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def set(self, key: str, data: Any, ttl: float | None = None) -> bool:
        try:
            encoded = json.dumps(data)
        except (TypeError, ValueError) as e:
            logger.error("Cache SET failed for {}: {}", key, e)
            return False
        metadata = CacheMetadata(
            key=key,
            timestamp=self._now_ms(),
            ttl=int((ttl if ttl is not None else self.default_ttl) * 1000),
            size=len(encoded),
        )
        # Stored decoded from its JSON form so callers can't mutate the entry.
        self._entries[KeyedFileCache.sanitize(key)] = CacheEntry(metadata=metadata, data=json.loads(encoded))
        return True

    async def get(self, key: str, ttl: float | None = None) -> Any | None:
        name = KeyedFileCache.sanitize(key)
        entry = self._entries.get(name)
        if entry is None:
            return None
        if entry.metadata.is_expired(self._now_ms(), None if ttl is None else int(ttl * 1000)):
            del self._entries[name]
            return None
        return json.loads(json.dumps(entry.data))

    async def exists(self, key: str, ttl: float | None = None) -> bool:
        entry = self._entries.get(KeyedFileCache.sanitize(key))
        return entry is not None and not entry.metadata.is_expired(
            self._now_ms(), None if ttl is None else int(ttl * 1000)
        )

    async def delete(self, key: str) -> bool:
        return self._entries.pop(KeyedFileCache.sanitize(key), None) is not None

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    async def stats(self) -> CacheStats:
        return CacheStats(
            count=len(self._entries),
            total_size=sum(e.metadata.size for e in self._entries.values()),
        )

    async def sweep(self) -> SweepResult:
        now_ms = self._now_ms()
        result = SweepResult()
        for name, entry in list(self._entries.items()):
            if entry.metadata.is_expired(now_ms):
                del self._entries[name]
                result.deleted_count += 1
                result.deleted_size += entry.metadata.size
        result.remaining_size = sum(e.metadata.size for e in self._entries.values())
        return result

    async def drain(self) -> None:
        return None

    async def close(self) -> None:
        return None
