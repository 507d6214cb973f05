"""Event records as stored in the events directory."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

DEFAULT_EVENT_NAME = "Game Night"


class Experience(StrEnum):
    """Group experience level."""

    NEWBIES = "newbies"
    MIXED = "mixed"
    ENTHUSIASTS = "enthusiasts"


class Mood(StrEnum):
    """Desired mood of the evening."""

    THINKY = "thinky"
    SOCIAL = "social"
    CHAOTIC = "chaotic"
    CHILL = "chill"


class ScenarioFilters(BaseModel):
    """Answers from the scenario wizard, kept with the event."""

    players: int | None = Field(default=None, ge=1, le=12)
    experience: Experience | None = None
    duration: int | None = Field(default=None, gt=0)
    mood: Mood | None = None
    cooperative: bool | None = None


class GameRef(BaseModel):
    """Snapshot of a collection game taken when it is added to an event."""

    id: str
    name: str
    thumbnail: str | None = None
    weight: float | None = None
    playing_time: int | None = Field(alias="playingTime", default=None)
    min_players: int | None = Field(alias="minPlayers", default=None)
    max_players: int | None = Field(alias="maxPlayers", default=None)

    class Config:
        populate_by_name = True


class Event(BaseModel):
    """Game night event.

    ``votes`` maps a voter fingerprint to that voter's ranked game ids. Every
    id in a ballot refers to a game in ``games``.
    """

    id: str
    created_by: str = Field(alias="createdBy", min_length=1)
    created_at: datetime = Field(alias="createdAt")
    name: str = DEFAULT_EVENT_NAME
    scenario: ScenarioFilters | None = None
    games: list[GameRef] = []
    votes: dict[str, list[str]] = {}
    creator_token: str | None = Field(alias="creatorToken", default=None)

    class Config:
        populate_by_name = True

    def game_ids(self) -> list[str]:
        return [g.id for g in self.games]

    def has_game(self, game_id: str) -> bool:
        return any(g.id == game_id for g in self.games)

    def public(self) -> "Event":
        """Copy without the creator token."""
        return self.model_copy(update={"creator_token": None})

    def to_json_dict(self, include_token: bool = False) -> dict:
        exclude = None if include_token else {"creator_token"}
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)
