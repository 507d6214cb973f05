"""Keyed file cache - one JSON envelope per key with TTL and size eviction."""

import asyncio
import json
import re
import time
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Any

from loguru import logger

from app.models.common import CacheEntry, CacheMetadata, CacheStats, SweepResult
from app.repositories.base import BaseRepository
from app.workers import TaskQueue
from settings import CACHE_TTL, MAX_CACHE_AGE, MAX_CACHE_SIZE
from settings.units import format_age, format_size

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

# Fractions of max_size: a write above TRIGGER schedules eviction,
# eviction stops once the total is at or below TARGET.
EVICTION_TRIGGER = 0.8
EVICTION_TARGET = 0.9

# Orphaned .tmp/.lock siblings older than this are removed by the sweep.
STALE_FILE_AGE = 60


class WriteState(StrEnum):
    """Per-key write state, held in-process."""

    IDLE = "idle"
    WRITING = "writing"


class KeyedFileCache(BaseRepository):
    """TTL/size-bounded key -> JSON cache over a directory.

    Writes for one key are serialized in-process and go through
    temp-file + rename, so a reader sees either the old or the new entry in
    full. A ``.lock`` marker exists on disk during the write window; readers
    in this process that hit a key in ``WRITING`` state (or find a marker)
    get a miss instead of waiting. The marker gives no mutual exclusion
    across processes sharing the directory.

    Keys are sanitized to ``[a-zA-Z0-9_-]`` for the file name, so distinct
    keys may collide (``"a b"`` and ``"a_b"``).
    """

    backend = "filesystem"

    def __init__(
        self,
        root: Path | str,
        max_size: int = MAX_CACHE_SIZE,
        default_ttl: float = CACHE_TTL,
        max_age: float = MAX_CACHE_AGE,
        queue: TaskQueue | None = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(root, clock)
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.max_age = max_age
        self._queue = queue or TaskQueue("cache-eviction")
        self._states: dict[str, WriteState] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._writers: dict[str, int] = {}
        self._eviction_pending = False

    @staticmethod
    def sanitize(key: str) -> str:
        return _UNSAFE_KEY_CHARS.sub("_", key)

    def _entry_path(self, name: str) -> Path:
        return self._root / f"{name}.json"

    def _lock_path(self, name: str) -> Path:
        return self._root / f"{name}.json.lock"

    def state(self, key: str) -> WriteState:
        return self._states.get(self.sanitize(key), WriteState.IDLE)

    @property
    def tracked_keys(self) -> int:
        """Keys with a write lock held or awaited."""
        return len(self._locks)

    def _release_writer(self, name: str) -> None:
        remaining = self._writers[name] - 1
        if remaining:
            self._writers[name] = remaining
            return
        del self._writers[name]
        self._locks.pop(name, None)

    def _ttl_ms(self, ttl: float | None) -> int | None:
        return None if ttl is None else int(ttl * 1000)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def set(self, key: str, data: Any, ttl: float | None = None) -> bool:
        """Store ``data`` under ``key``. Returns False on any failure."""
        name = self.sanitize(key)
        try:
            size = len(json.dumps(data))
            metadata = CacheMetadata(
                key=key,
                timestamp=self.now_ms(),
                ttl=int((ttl if ttl is not None else self.default_ttl) * 1000),
                size=size,
            )
            content = json.dumps({"metadata": metadata.to_dict(), "data": data}, indent=2)
        except (TypeError, ValueError) as e:
            logger.error("Cache SET failed for {}: {}", key, e)
            return False

        lock = self._locks.get(name)
        if lock is None:
            lock = self._locks[name] = asyncio.Lock()
        self._writers[name] = self._writers.get(name, 0) + 1
        try:
            async with lock:
                self._states[name] = WriteState.WRITING
                try:
                    await asyncio.to_thread(self._write_entry, name, content)
                except OSError as e:
                    logger.error("Cache SET failed for {}: {}", key, e)
                    return False
                finally:
                    self._states.pop(name, None)
        finally:
            self._release_writer(name)

        logger.info("Cache SET: {} ({})", key, format_size(size))
        await self._maybe_schedule_eviction()
        return True

    async def get(self, key: str, ttl: float | None = None) -> Any | None:
        """Cached payload, or None if missing, locked, corrupt or expired."""
        name = self.sanitize(key)
        if self._states.get(name) is WriteState.WRITING or self._lock_path(name).exists():
            logger.debug("Cache LOCKED: {} (write in progress)", key)
            return None

        entry = await self._load(name, key)
        if entry is None:
            return None

        now_ms = self.now_ms()
        if entry.metadata.is_expired(now_ms, self._ttl_ms(ttl)):
            logger.info("Cache EXPIRED: {}", key)
            await self.delete(key)
            return None

        logger.debug("Cache HIT: {} (age: {})", key, format_age(entry.metadata.timestamp, now_ms / 1000))
        return entry.data

    async def exists(self, key: str, ttl: float | None = None) -> bool:
        """True if a non-expired entry exists. Never deletes."""
        name = self.sanitize(key)
        try:
            entry = await asyncio.to_thread(self._read_entry, name)
        except (OSError, ValueError, KeyError, TypeError):
            return False
        return entry is not None and not entry.metadata.is_expired(self.now_ms(), self._ttl_ms(ttl))

    async def delete(self, key: str) -> bool:
        """Remove an entry. Missing entries are not an error."""
        try:
            removed = await asyncio.to_thread(self.remove, self._entry_path(self.sanitize(key)))
        except OSError as e:
            logger.warning("Cache DELETE failed for {}: {}", key, e)
            return False
        if removed:
            logger.debug("Cache DELETE: {}", key)
        return removed

    async def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        count = await asyncio.to_thread(self._clear_sync)
        logger.info("Cache cleared: {} files deleted", count)
        return count

    async def stats(self) -> CacheStats:
        return await asyncio.to_thread(self._stats_sync)

    async def sweep(self) -> SweepResult:
        """Drop corrupt, expired and over-age entries, then oldest-first down to 90% of max_size."""
        writing = frozenset(n for n, s in self._states.items() if s is WriteState.WRITING)
        return await asyncio.to_thread(self._sweep_sync, self.now_ms(), writing)

    async def drain(self) -> None:
        """Wait for scheduled eviction passes to finish."""
        await self._queue.join()

    async def close(self) -> None:
        """Stop the eviction worker; a queued pass is dropped and may be rescheduled."""
        await self._queue.close()
        self._eviction_pending = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(self, name: str, key: str) -> CacheEntry | None:
        try:
            return await asyncio.to_thread(self._read_entry, name)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Cache CORRUPT: {} ({}), removing", key, e)
            await asyncio.to_thread(self.remove, self._entry_path(name))
            return None
        except OSError as e:
            logger.error("Cache GET failed for {}: {}", key, e)
            return None

    async def _maybe_schedule_eviction(self) -> None:
        if self._eviction_pending:
            return
        stats = await self.stats()
        if stats.total_size > self.max_size * EVICTION_TRIGGER:
            logger.debug("Cache at {} of {}, scheduling eviction", format_size(stats.total_size), format_size(self.max_size))
            self._eviction_pending = True
            self._queue.submit(self._evict)

    async def _evict(self) -> None:
        try:
            await self.sweep()
        finally:
            self._eviction_pending = False

    def _write_entry(self, name: str, content: str) -> None:
        self.ensure_dir()
        self.write_atomic(self._entry_path(name), content, lock_path=self._lock_path(name))

    def _read_entry(self, name: str) -> CacheEntry | None:
        path = self._entry_path(name)
        try:
            raw = self.read_json(path)
        except FileNotFoundError:
            return None
        return CacheEntry.from_dict(raw)

    def _clear_sync(self) -> int:
        return sum(self.remove(path) for path in self.json_files())

    def _stats_sync(self) -> CacheStats:
        count, total = 0, 0
        for path in self.json_files():
            try:
                total += path.stat().st_size
                count += 1
            except FileNotFoundError:
                continue
        return CacheStats(count=count, total_size=total)

    def _sweep_sync(self, now_ms: int, writing: frozenset[str]) -> SweepResult:
        result = SweepResult()
        max_age_ms = int(self.max_age * 1000)
        live: list[tuple[Path, int, CacheMetadata]] = []
        total = 0

        for path in self.json_files():
            try:
                size = path.stat().st_size
            except FileNotFoundError:
                continue
            try:
                entry = CacheEntry.from_dict(self.read_json(path))
            except FileNotFoundError:
                continue
            except (ValueError, KeyError, TypeError):
                if self.remove(path):
                    result.deleted_count += 1
                    result.deleted_size += size
                continue

            meta = entry.metadata
            if meta.is_expired(now_ms) or meta.age_ms(now_ms) > max_age_ms:
                if self.remove(path):
                    result.deleted_count += 1
                    result.deleted_size += size
                continue

            live.append((path, size, meta))
            total += size

        if total > self.max_size:
            live.sort(key=lambda item: item[2].timestamp)
            for path, size, _ in live:
                if total <= self.max_size * EVICTION_TARGET:
                    break
                if self.remove(path):
                    result.deleted_count += 1
                    result.deleted_size += size
                total -= size

        self._remove_stale_siblings(writing)
        result.remaining_size = total

        if result.deleted_count:
            logger.info(
                "Cache cleanup: deleted {} files ({}), {} remaining",
                result.deleted_count,
                format_size(result.deleted_size),
                format_size(total),
            )
        return result

    def _remove_stale_siblings(self, writing: frozenset[str]) -> None:
        if not self._root.is_dir():
            return
        now = time.time()
        for pattern in ("*.json.tmp", "*.json.lock"):
            for path in self._root.glob(pattern):
                name = path.name.rsplit(".json.", 1)[0]
                if name in writing:
                    continue
                try:
                    if now - path.stat().st_mtime > STALE_FILE_AGE:
                        path.unlink(missing_ok=True)
                        logger.debug("Removed stale {}", path.name)
                except FileNotFoundError:
                    continue
