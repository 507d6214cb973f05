"""Collection service - cache-backed reads and forced refreshes."""

from loguru import logger

from app.models.collection import SyncResult
from etl import CollectionSyncEngine, collection_key


class CollectionService:
    """Serves a user's collection from the cache, syncing on a miss."""

    def __init__(self, cache, sync_engine: CollectionSyncEngine):
        self._cache = cache
        self._sync = sync_engine

    async def get_collection(self, username: str) -> dict:
        cached = await self._cache.get(collection_key(username))
        if isinstance(cached, dict):
            logger.debug("Collection {} served from cache", username)
            return {"username": username, "games": cached.get("games", []), "fromCache": True}

        result = await self._sync.sync(username)
        return {"username": username, "games": result.all_games, "fromCache": False}

    async def refresh(self, username: str) -> SyncResult:
        return await self._sync.sync(username)
