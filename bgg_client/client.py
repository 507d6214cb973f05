"""Catalog API client."""

from collections.abc import Iterable

from loguru import logger

from bgg_client.base import BaseClient
from bgg_client.parser import parse_collection, parse_things
from bgg_client.schemas import GameDetail, GameSummary


class CatalogClient(BaseClient):
    """Client for collection and thing endpoints."""

    async def fetch_summary(self, username: str) -> list[GameSummary]:
        """GET /collection?username=...&own=1 - owned games, lightweight."""
        text = await self._get(
            "collection",
            {"username": username, "own": 1},
        )
        games = parse_collection(text)
        logger.info("Collection {}: {} owned games", username, len(games))
        return games

    async def fetch_details(self, ids: Iterable[str]) -> list[GameDetail]:
        """GET /thing?id=1,2,3&stats=1 - full records for one batch."""
        ids = list(ids)
        if not ids:
            return []
        text = await self._get("thing", {"id": ",".join(ids), "stats": 1})
        return parse_things(text)
