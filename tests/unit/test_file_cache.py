"""Tests for the keyed file cache."""

import asyncio
import importlib
import json
import os
import time
import typing

from app.repositories import KeyedFileCache, WriteState
from app.workers import TaskQueue


def _cache(tmp_path, clock, **kwargs) -> KeyedFileCache:
    return KeyedFileCache(tmp_path / "cache", clock=clock, **kwargs)


def _leftovers(root) -> list[str]:
    return sorted(p.name for p in root.iterdir() if p.name.endswith((".tmp", ".lock")))


class TestSetGet:
    def test_roundtrip(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            assert await cache.set("user_1", {"games": [{"id": "13"}]})
            return await cache.get("user_1")

        assert asyncio.run(scenario()) == {"games": [{"id": "13"}]}

        raw = json.loads((tmp_path / "cache" / "user_1.json").read_text())
        assert raw["metadata"]["key"] == "user_1"
        assert raw["metadata"]["timestamp"] == int(clock.now * 1000)
        assert raw["metadata"]["size"] == len(json.dumps({"games": [{"id": "13"}]}))
        assert _leftovers(tmp_path / "cache") == []

    def test_missing(self, tmp_path, clock):
        assert asyncio.run(_cache(tmp_path, clock).get("nope")) is None

    def test_overwrite_replaces_entry(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            await cache.set("k", {"a": 1, "b": 2})
            await cache.set("k", {"c": 3})
            return await cache.get("k")

        assert asyncio.run(scenario()) == {"c": 3}

    def test_sanitized_keys_collide(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            await cache.set("a b/c", "first")
            return await cache.get("a_b_c")

        assert asyncio.run(scenario()) == "first"
        assert (tmp_path / "cache" / "a_b_c.json").exists()

    def test_unserializable_payload(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        assert asyncio.run(cache.set("k", {1, 2, 3})) is False
        assert not (tmp_path / "cache" / "k.json").exists()

    def test_write_failure_cleans_up(self, tmp_path, clock, monkeypatch):
        cache = _cache(tmp_path, clock)

        def boom(*_):
            raise OSError("disk full")

        monkeypatch.setattr("app.repositories.base.os.replace", boom)
        assert asyncio.run(cache.set("k", {"a": 1})) is False
        assert _leftovers(tmp_path / "cache") == []
        assert cache.state("k") is WriteState.IDLE


class TestExpiry:
    def test_ttl_expiry_deletes(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        path = tmp_path / "cache" / "k.json"

        async def scenario():
            await cache.set("k", "v", ttl=0.1)
            first = await cache.get("k")
            clock.advance(0.15)
            return first, await cache.get("k")

        assert asyncio.run(scenario()) == ("v", None)
        assert not path.exists()

    def test_caller_ttl_overrides_stored(self, tmp_path, clock):
        cache = _cache(tmp_path, clock, default_ttl=3600)

        async def scenario():
            await cache.set("k", "v")
            clock.advance(20)
            return await cache.get("k", ttl=3600), await cache.get("k", ttl=10)

        assert asyncio.run(scenario()) == ("v", None)

    def test_exists_never_deletes(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            await cache.set("k", "v", ttl=1)
            fresh = await cache.exists("k")
            clock.advance(2)
            return fresh, await cache.exists("k")

        assert asyncio.run(scenario()) == (True, False)
        assert (tmp_path / "cache" / "k.json").exists()


class TestLocking:
    def test_lock_marker_hides_entry(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        lock = tmp_path / "cache" / "k.json.lock"

        async def scenario():
            await cache.set("k", "v")
            lock.touch()
            hidden = await cache.get("k")
            lock.unlink()
            return hidden, await cache.get("k")

        assert asyncio.run(scenario()) == (None, "v")

    def test_state_during_write(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        seen = []
        original = cache._write_entry

        def spy(name, content):
            seen.append(cache.state("k"))
            original(name, content)
            seen.append(cache.state("k"))

        cache._write_entry = spy
        asyncio.run(cache.set("k", "v"))
        assert seen[0] is WriteState.WRITING
        assert seen[1] is WriteState.WRITING
        assert cache.state("k") is WriteState.IDLE

    def test_concurrent_sets_never_mix(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        payloads = [{"writer": i, "blob": str(i) * 5000} for i in range(8)]

        async def scenario():
            results = await asyncio.gather(*[cache.set("k", p) for p in payloads])
            return results, await cache.get("k")

        results, value = asyncio.run(scenario())
        assert all(results)
        assert value in payloads
        assert _leftovers(tmp_path / "cache") == []


class TestHousekeeping:
    def test_delete_is_idempotent(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            await cache.set("k", "v")
            return await cache.delete("k"), await cache.delete("k")

        assert asyncio.run(scenario()) == (True, False)

    def test_clear_and_stats(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            for i in range(3):
                await cache.set(f"k{i}", {"i": i})
            before = await cache.stats()
            on_disk = sum(p.stat().st_size for p in (tmp_path / "cache").glob("*.json"))
            cleared = await cache.clear()
            return before, on_disk, cleared, await cache.stats()

        before, on_disk, cleared, after = asyncio.run(scenario())
        assert before.count == 3
        assert before.total_size == on_disk
        assert cleared == 3
        assert (after.count, after.total_size) == (0, 0)

    def test_corrupt_entry_on_read_is_removed(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        path = tmp_path / "cache" / "bad.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert asyncio.run(cache.get("bad")) is None
        assert not path.exists()


class TestSweep:
    def test_removes_corrupt_expired_and_old(self, tmp_path, clock):
        cache = _cache(tmp_path, clock, max_age=3600)
        root = tmp_path / "cache"

        async def scenario():
            await cache.set("short", "v", ttl=10)
            await cache.set("forever", "v", ttl=10 * 365 * 86400)
            await cache.set("fresh", "v")
            (root / "garbage.json").write_text("[]")
            (root / "broken.json").write_text("{")
            clock.advance(1800)
            await cache.set("newest", "v")
            clock.advance(1801)
            return await cache.sweep()

        result = asyncio.run(scenario())
        assert result.deleted_count == 5
        assert sorted(p.name for p in root.glob("*.json")) == ["newest.json"]

    def test_size_eviction_oldest_first(self, tmp_path, clock):
        writer = _cache(tmp_path, clock, max_size=10 * 1024 * 1024)

        async def fill():
            for i in range(10):
                await writer.set(f"k{i}", "x" * 1000)
                clock.advance(1)
            return await writer.stats()

        stats = asyncio.run(fill())
        assert stats.count == 10

        max_size = int(stats.total_size * 0.7)
        sweeper = _cache(tmp_path, clock, max_size=max_size)
        result = asyncio.run(sweeper.sweep())

        remaining = sorted(p.stem for p in (tmp_path / "cache").glob("*.json"))
        assert result.remaining_size <= max_size * 0.9
        assert remaining == [f"k{i}" for i in range(4, 10)]

    def test_stale_siblings_removed(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        root = tmp_path / "cache"
        root.mkdir(parents=True)
        stale_tmp, stale_lock, fresh_lock = root / "a.json.tmp", root / "b.json.lock", root / "c.json.lock"
        for path in (stale_tmp, stale_lock, fresh_lock):
            path.touch()
        old = time.time() - 3600
        os.utime(stale_tmp, (old, old))
        os.utime(stale_lock, (old, old))

        asyncio.run(cache.sweep())
        assert not stale_tmp.exists()
        assert not stale_lock.exists()
        assert fresh_lock.exists()

    def test_set_schedules_eviction(self, tmp_path, clock):
        queue = TaskQueue("test-eviction")
        cache = _cache(tmp_path, clock, max_size=4000, queue=queue)

        async def scenario():
            for i in range(8):
                await cache.set(f"k{i}", "x" * 800)
                clock.advance(1)
                await cache.drain()
            stats = await cache.stats()
            newest = await cache.get("k7")
            await cache.close()
            return stats, newest

        stats, newest = asyncio.run(scenario())
        assert stats.total_size <= 4000
        assert newest == "x" * 800
        assert not (tmp_path / "cache" / "k0.json").exists()

    def test_eviction_rescheduled_after_close(self, tmp_path, clock):
        queue = TaskQueue("test-eviction")
        cache = _cache(tmp_path, clock, max_size=2000, queue=queue)

        async def scenario():
            for i in range(2):
                await cache.set(f"k{i}", "x" * 800)
                clock.advance(1)
            # the queued pass is dropped with the worker
            await cache.close()
            await cache.set("k2", "x" * 800)
            await cache.drain()
            stats = await cache.stats()
            await cache.close()
            return stats

        stats = asyncio.run(scenario())
        assert stats.total_size <= 2000
        assert not (tmp_path / "cache" / "k0.json").exists()
        assert (tmp_path / "cache" / "k2.json").exists()


class TestBookkeeping:
    def test_module_annotations_resolve(self):
        module = importlib.import_module("app.repositories.common.cache")
        hints = typing.get_type_hints(module.KeyedFileCache._sweep_sync)
        assert hints["writing"] == frozenset[str]

    def test_write_locks_released(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)

        async def scenario():
            await asyncio.gather(*[cache.set("shared", i) for i in range(5)])
            await asyncio.gather(*[cache.set(f"k{i}", i) for i in range(20)])
            return cache.tracked_keys

        assert asyncio.run(scenario()) == 0
        assert cache.state("shared") is WriteState.IDLE

    def test_failed_write_releases_lock(self, tmp_path, clock, monkeypatch):
        cache = _cache(tmp_path, clock)

        def boom(*_):
            raise OSError("disk full")

        monkeypatch.setattr("app.repositories.base.os.replace", boom)
        assert asyncio.run(cache.set("k", 1)) is False
        assert cache.tracked_keys == 0
