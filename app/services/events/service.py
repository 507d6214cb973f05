"""Event service - event reads with live rankings, and mutations."""

from loguru import logger

from app.models.events import Event, GameRef, ScenarioFilters
from app.repositories.events import EventStore
from app.services.events.aggregator import VoteAggregator


class EventService:
    """Event business logic over :class:`EventStore`.

    Token checks are not done here; the API layer verifies the creator
    token before calling a mutator.
    """

    def __init__(self, store: EventStore, aggregator: VoteAggregator):
        self._store = store
        self._aggregator = aggregator
        logger.debug("EventService initialized")

    async def create(self, created_by: str, name: str | None = None, scenario: ScenarioFilters | None = None) -> Event:
        return await self._store.create(created_by, name=name, scenario=scenario)

    async def get(self, event_id: str) -> Event | None:
        return await self._store.get(event_id)

    async def verify_token(self, event_id: str, token: str | None) -> bool:
        return await self._store.verify_token(event_id, token)

    async def details(self, event_id: str, token: str | None = None) -> dict | None:
        """Public event plus scores, recomputed on every call."""
        event = await self._store.get(event_id)
        if event is None:
            return None
        is_creator = await self._store.verify_token(event_id, token) if token else False
        return {
            "event": event.public(),
            "scores": self._aggregator.scores(event),
            "voter_count": len(event.votes),
            "is_creator": is_creator,
        }

    async def list_for_user(self, username: str) -> list[Event]:
        return [e.public() for e in await self._store.list_by_user(username)]

    async def rename(self, event_id: str, name: str) -> Event | None:
        return await self._store.update(event_id, name=name)

    async def delete(self, event_id: str) -> bool:
        return await self._store.delete(event_id)

    async def add_game(self, event_id: str, game: GameRef) -> Event | None:
        return await self._store.add_game(event_id, game)

    async def remove_game(self, event_id: str, game_id: str) -> Event | None:
        return await self._store.remove_game(event_id, game_id)

    async def vote(self, event_id: str, fingerprint: str, ranked_ids: list[str]) -> Event | None:
        return await self._store.vote(event_id, fingerprint, ranked_ids)
