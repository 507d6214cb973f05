"""Tests for the incremental collection sync and the collection service."""

import asyncio

import pytest

from app.repositories import KeyedFileCache
from app.services import CollectionService
from bgg_client import CatalogNotFoundError
from etl import CollectionSyncEngine, collection_key


@pytest.fixture
def cache(tmp_path, clock):
    return KeyedFileCache(tmp_path / "cache", clock=clock)


def _engine(cache, catalog, **kwargs) -> CollectionSyncEngine:
    return CollectionSyncEngine(cache, client_factory=catalog.client, **kwargs)


def _entry_file(cache, username: str):
    return cache.root / f"{cache.sanitize(collection_key(username))}.json"


class TestSync:
    def test_cold_sync_fetches_everything(self, cache, catalog):
        result = asyncio.run(_engine(cache, catalog).sync("alice"))

        assert result.has_new_games is True
        assert result.total_games == 3
        assert result.new_games_count == 3
        assert catalog.detail_calls == [["1", "2", "3"]]
        assert all(g["detailed"] for g in result.all_games)
        assert result.all_games[0]["weight"] == 2.5

        cached = asyncio.run(cache.get(collection_key("alice")))
        assert cached["username"] == "alice"
        assert [g["id"] for g in cached["games"]] == ["1", "2", "3"]
        assert "updatedAt" in cached

    def test_unchanged_collection_leaves_cache_untouched(self, cache, catalog, clock):
        engine = _engine(cache, catalog)
        asyncio.run(engine.sync("alice"))
        before = _entry_file(cache, "alice").read_bytes()

        clock.advance(60)
        result = asyncio.run(engine.sync("alice"))

        assert result.has_new_games is False
        assert (result.new_games_count, result.removed_games_count) == (0, 0)
        assert result.total_games == 3
        assert len(catalog.detail_calls) == 1
        assert _entry_file(cache, "alice").read_bytes() == before

    def test_duplicate_ids_counted_once(self, cache, catalog):
        catalog.ids = ["1", "2", "2", "3"]
        result = asyncio.run(_engine(cache, catalog).sync("alice"))

        assert result.total_games == 3
        assert [g["id"] for g in result.all_games] == ["1", "2", "3"]
        assert catalog.detail_calls == [["1", "2", "3"]]

    def test_only_new_ids_fetched(self, cache, catalog):
        engine = _engine(cache, catalog)
        asyncio.run(engine.sync("alice"))

        catalog.ids = ["1", "3", "4", "5"]
        result = asyncio.run(engine.sync("alice"))

        assert catalog.detail_calls[-1] == ["4", "5"]
        assert result.has_new_games is True
        assert result.new_games_count == 2
        assert result.removed_games_count == 1
        assert [g["id"] for g in result.all_games] == ["1", "3", "4", "5"]

    def test_removal_only_still_rewrites(self, cache, catalog):
        engine = _engine(cache, catalog)
        asyncio.run(engine.sync("alice"))

        catalog.ids = ["1"]
        result = asyncio.run(engine.sync("alice"))

        assert result.has_new_games is True
        assert result.new_games_count == 0
        assert result.removed_games_count == 2
        assert len(catalog.detail_calls) == 1
        cached = asyncio.run(cache.get(collection_key("alice")))
        assert [g["id"] for g in cached["games"]] == ["1"]

    def test_batches_and_failed_batch_fallback(self, cache, catalog):
        catalog.ids = [str(i) for i in range(1, 6)]
        catalog.fail_ids = {"3"}
        result = asyncio.run(_engine(cache, catalog, batch_size=2).sync("alice"))

        assert catalog.detail_calls == [["1", "2"], ["3", "4"], ["5"]]
        detailed = {g["id"]: g["detailed"] for g in result.all_games}
        assert detailed == {"1": True, "2": True, "3": False, "4": False, "5": True}
        assert result.total_games == 5

    def test_summary_failure_propagates(self, cache, catalog):
        catalog.summary_error = CatalogNotFoundError("no such user")
        with pytest.raises(CatalogNotFoundError):
            asyncio.run(_engine(cache, catalog).sync("ghost"))
        assert not _entry_file(cache, "ghost").exists()

    def test_empty_collection_is_cached(self, cache, catalog):
        catalog.ids = []
        result = asyncio.run(_engine(cache, catalog).sync("alice"))

        assert result.total_games == 0
        assert catalog.detail_calls == []
        assert asyncio.run(cache.get(collection_key("alice")))["games"] == []


class TestCollectionService:
    def test_miss_then_hit(self, cache, catalog):
        service = CollectionService(cache, _engine(cache, catalog))

        async def scenario():
            return await service.get_collection("alice"), await service.get_collection("alice")

        first, second = asyncio.run(scenario())
        assert first["fromCache"] is False
        assert second["fromCache"] is True
        assert second["games"] == first["games"]
        assert catalog.summary_calls == 1

    def test_refresh_always_syncs(self, cache, catalog):
        service = CollectionService(cache, _engine(cache, catalog))

        async def scenario():
            await service.get_collection("alice")
            return await service.refresh("alice")

        result = asyncio.run(scenario())
        assert result.has_new_games is False
        assert catalog.summary_calls == 2
