"""Collection ETL - reconcile a cached game list with the owned list."""

from collections.abc import Callable
from datetime import datetime, timezone

from loguru import logger

from app.models.collection import SyncResult
from bgg_client import CatalogClient, CatalogError, GameSummary, to_record
from etl.helpers import batched, diff_ids, unique_by_id
from settings import BGG_BATCH_SIZE


def collection_key(username: str) -> str:
    return f"collection_{username}"


class CollectionSyncEngine:
    """Incremental collection sync through the cache.

    Only ids that are new since the cached list get a detail fetch. The
    cache entry is replaced as a whole, never patched.
    """

    def __init__(
        self,
        cache,
        client_factory: Callable[[], CatalogClient] = CatalogClient,
        batch_size: int = BGG_BATCH_SIZE,
    ):
        self._cache = cache
        self._client_factory = client_factory
        self._batch_size = batch_size

    async def sync(self, username: str) -> SyncResult:
        """Sync ``username``'s collection. Summary fetch failures propagate."""
        key = collection_key(username)
        cached = await self._cache.get(key)
        cached_games = unique_by_id(cached.get("games", [])) if isinstance(cached, dict) else []

        async with self._client_factory() as client:
            summary: dict[str, GameSummary] = {}
            for game in await client.fetch_summary(username):
                summary.setdefault(str(game.id), game)

            diff = diff_ids([g["id"] for g in cached_games], list(summary))
            if cached is not None and not diff.changed:
                logger.info("Collection {}: no changes ({} games)", username, len(cached_games))
                return SyncResult(
                    has_new_games=False,
                    total_games=len(cached_games),
                    new_games_count=0,
                    removed_games_count=0,
                    new_games=[],
                    all_games=cached_games,
                )

            logger.info(
                "Collection {}: +{} new, -{} removed",
                username,
                len(diff.added),
                len(diff.removed),
            )
            new_games = await self._fetch_details(client, diff.added, summary)

        removed = set(diff.removed)
        merged = unique_by_id([g for g in cached_games if g["id"] not in removed] + new_games)

        payload = {
            "username": username,
            "games": merged,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        if not await self._cache.set(key, payload):
            logger.warning("Collection {}: synced but cache write failed", username)

        return SyncResult(
            has_new_games=diff.changed,
            total_games=len(merged),
            new_games_count=len(new_games),
            removed_games_count=len(diff.removed),
            new_games=new_games,
            all_games=merged,
        )

    async def _fetch_details(
        self,
        client: CatalogClient,
        ids: list[str],
        summary: dict[str, GameSummary],
    ) -> list[dict]:
        """Detail records for ``ids``, batch by batch (sequential, rate limited).

        A failed batch falls back to the bare summary records for its ids.
        """
        records: list[dict] = []
        total_batches = (len(ids) + self._batch_size - 1) // self._batch_size

        for batch_num, batch in enumerate(batched(ids, self._batch_size), start=1):
            logger.info("Detail batch {}/{} ({} ids)", batch_num, total_batches, len(batch))
            try:
                details = {str(d.id): to_record(d) for d in await client.fetch_details(batch)}
            except CatalogError as e:
                logger.warning("Detail batch {} failed: {} - keeping summary records", batch_num, e)
                details = {}

            for game_id in batch:
                records.append(details.get(game_id) or to_record(summary[game_id]))

        return records
