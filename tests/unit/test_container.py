"""Tests for container wiring and lifecycle."""

import asyncio

from app.container import container, filesystem_writable
from app.repositories import KeyedFileCache, MemoryCache


class TestContainer:
    def test_filesystem_backend(self, app_container, tmp_path):
        assert isinstance(app_container.cache, KeyedFileCache)
        assert app_container.cache.root == tmp_path / "cache"
        assert app_container.initialized

    def test_falls_back_to_memory(self, tmp_path, catalog, clock):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        assert filesystem_writable(blocker) is False

        container.reset()
        try:
            container.init(cache_dir=blocker, events_dir=tmp_path / "events", client_factory=catalog.client, clock=clock)
            assert isinstance(container.cache, MemoryCache)
            assert container.cache.backend == "memory"
        finally:
            container.reset()

    def test_init_is_idempotent(self, app_container, tmp_path):
        cache = app_container.cache
        app_container.init(cache_dir=tmp_path / "other")
        assert app_container.cache is cache

    def test_start_and_stop(self, app_container):
        async def scenario():
            await app_container.start()
            running = app_container.cache_sweeper.running, app_container.event_sweeper.running
            await asyncio.sleep(0.01)
            await app_container.stop()
            return running

        assert asyncio.run(scenario()) == (True, True)
        assert app_container.cache_sweeper.runs == 1
        assert app_container.event_sweeper.runs == 1
        assert not app_container.cache_sweeper.running
