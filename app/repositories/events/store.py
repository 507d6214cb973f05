"""Event store - one JSON file per event, token-gated mutation, age-based expiry."""

import asyncio
import json
import re
import secrets
import string
import time
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pydantic
from loguru import logger

from app.models.events import DEFAULT_EVENT_NAME, Event, GameRef, ScenarioFilters
from app.repositories.base import BaseRepository
from settings import EVENT_MAX_AGE

ID_ALPHABET = string.ascii_letters + string.digits + "_-"
ID_LENGTH = 8
_VALID_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_MAX_ID_ATTEMPTS = 10

_EDITABLE_FIELDS = ("name", "scenario", "games", "votes")


def new_event_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def new_creator_token() -> str:
    return secrets.token_urlsafe(24)


class EventStore(BaseRepository):
    """CRUD over event files.

    Mutators are read-modify-write against a single file without any
    concurrency check: two concurrent mutations of the same event race and
    the later write wins. Authorization is the caller's job
    (``verify_token`` before ``delete``/``add_game``/``remove_game``/``update``).
    """

    def __init__(
        self,
        root: Path | str,
        max_age: float = EVENT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(root, clock)
        self.max_age = max_age

    def _path(self, event_id: str) -> Path | None:
        if not isinstance(event_id, str) or not _VALID_ID.match(event_id):
            return None
        return self._root / f"{event_id}.json"

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create(
        self,
        created_by: str,
        name: str | None = None,
        scenario: ScenarioFilters | dict | None = None,
    ) -> Event:
        """Create an event. The returned record is the only one carrying the token."""
        if not created_by or not created_by.strip():
            raise ValueError("createdBy is required")
        event = await asyncio.to_thread(self._create_sync, created_by.strip(), name, scenario)
        logger.info("Event created: {} by {}", event.id, event.created_by)
        return event

    async def get(self, event_id: str) -> Event | None:
        """Full record including the creator token, or None."""
        path = self._path(event_id)
        if path is None:
            return None
        try:
            return await asyncio.to_thread(self._read_event, path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to get event {}: {}", event_id, e)
            return None

    async def get_public(self, event_id: str) -> Event | None:
        event = await self.get(event_id)
        return event.public() if event else None

    async def verify_token(self, event_id: str, token: str | None) -> bool:
        if not token:
            return False
        event = await self.get(event_id)
        if event is None or not event.creator_token:
            return False
        return secrets.compare_digest(event.creator_token.encode(), token.encode())

    async def update(self, event_id: str, **fields: Any) -> Event | None:
        """Shallow-merge editable fields into the event."""
        event = await self.get(event_id)
        if event is None:
            return None

        changes = {k: v for k, v in fields.items() if k in _EDITABLE_FIELDS}
        updated = Event.model_validate({**event.model_dump(), **changes})
        if not await self._save(updated):
            return None
        logger.info("Event updated: {} ({})", event_id, ", ".join(changes) or "no changes")
        return updated

    async def delete(self, event_id: str) -> bool:
        path = self._path(event_id)
        if path is None:
            return False
        try:
            removed = await asyncio.to_thread(self.remove, path)
        except OSError as e:
            logger.error("Failed to delete event {}: {}", event_id, e)
            return False
        if removed:
            logger.info("Event deleted: {}", event_id)
        return removed

    async def list_by_user(self, username: str) -> list[Event]:
        """Events created by ``username``, newest first. Unreadable files are skipped."""
        events = await asyncio.to_thread(self._scan)
        mine = [e for e in events if e.created_by == username]
        return sorted(mine, key=lambda e: e.created_at, reverse=True)

    async def add_game(self, event_id: str, game: GameRef) -> Event | None:
        """Append a game snapshot; unchanged if the id is already present."""
        event = await self.get(event_id)
        if event is None:
            return None
        if event.has_game(game.id):
            return event
        return await self.update(event_id, games=[*event.games, game])

    async def remove_game(self, event_id: str, game_id: str) -> Event | None:
        """Remove a game and prune it from every ballot (ballots themselves are kept)."""
        event = await self.get(event_id)
        if event is None:
            return None
        games = [g for g in event.games if g.id != game_id]
        votes = {fp: [gid for gid in ranking if gid != game_id] for fp, ranking in event.votes.items()}
        return await self.update(event_id, games=games, votes=votes)

    async def vote(self, event_id: str, fingerprint: str, ranked_ids: list[str]) -> Event | None:
        """Replace the fingerprint's ballot; unknown and repeated ids are dropped, order kept."""
        event = await self.get(event_id)
        if event is None:
            return None
        valid = set(event.game_ids())
        ballot = list(dict.fromkeys(gid for gid in ranked_ids if gid in valid))
        return await self.update(event_id, votes={**event.votes, fingerprint: ballot})

    async def stats(self) -> dict[str, int]:
        count = await asyncio.to_thread(lambda: len(self.json_files()))
        return {"eventCount": count}

    async def sweep(self) -> int:
        """Delete events older than ``max_age`` and files that fail to parse."""
        deleted = await asyncio.to_thread(self._sweep_sync, self._now())
        if deleted:
            logger.info("Event cleanup: deleted {} old/corrupted events", deleted)
        return deleted

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create_sync(self, created_by: str, name: str | None, scenario: Any) -> Event:
        self.ensure_dir()
        for _ in range(_MAX_ID_ATTEMPTS):
            event_id = new_event_id()
            path = self._path(event_id)
            if path.exists():
                logger.debug("Event id collision: {}", event_id)
                continue
            event = Event(
                id=event_id,
                created_by=created_by,
                created_at=self._now(),
                name=name or DEFAULT_EVENT_NAME,
                scenario=scenario,
                creator_token=new_creator_token(),
            )
            self._write_event(path, event)
            return event
        raise RuntimeError("Could not allocate a free event id")

    def _read_event(self, path: Path) -> Event | None:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            return Event.model_validate_json(content)
        except pydantic.ValidationError as e:
            raise ValueError(f"corrupt event file {path.name}") from e

    def _write_event(self, path: Path, event: Event) -> None:
        self.write_atomic(path, json.dumps(event.to_json_dict(include_token=True), indent=2))

    async def _save(self, event: Event) -> bool:
        path = self._path(event.id)
        try:
            await asyncio.to_thread(self._write_event, path, event)
            return True
        except OSError as e:
            logger.error("Failed to write event {}: {}", event.id, e)
            return False

    def _scan(self) -> list[Event]:
        events = []
        for path in self.json_files():
            try:
                event = self._read_event(path)
            except (OSError, ValueError):
                continue
            if event is not None:
                events.append(event)
        return events

    def _sweep_sync(self, now: datetime) -> int:
        deleted = 0
        for path in self.json_files():
            try:
                event = self._read_event(path)
            except ValueError:
                deleted += self.remove(path)
                continue
            except OSError as e:
                logger.warning("Event sweep skipped {}: {}", path.name, e)
                continue
            if event is None:
                continue
            created_at = event.created_at
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            if (now - created_at).total_seconds() > self.max_age:
                deleted += self.remove(path)
        return deleted
