"""Event API request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.events import GameRef, ScenarioFilters


class CreateEventRequest(BaseModel):
    """Body of an event creation request."""

    created_by: str = Field(alias="createdBy", min_length=1)
    name: str | None = Field(default=None, max_length=100)
    scenario: ScenarioFilters | None = None

    class Config:
        populate_by_name = True


class RenameEventRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class AddGameRequest(GameRef):
    """Game snapshot to add; same fields as the stored reference."""


class VoteRequest(BaseModel):
    fingerprint: str = Field(min_length=1, max_length=200)
    rankings: list[str]


class EventItem(BaseModel):
    """Public view of an event (no creator token)."""

    id: str
    created_by: str
    created_at: datetime
    name: str
    scenario: ScenarioFilters | None
    games: list[GameRef]
    votes: dict[str, list[str]]


class CreatedEventResponse(EventItem):
    """Creation response - the only place the creator token is returned."""

    creator_token: str


class ScoreItem(BaseModel):
    """Borda ranking row."""

    game_id: str
    name: str
    score: int
    vote_count: int


class EventDetailsResponse(BaseModel):
    event: EventItem
    scores: list[ScoreItem]
    voter_count: int
    is_creator: bool


class EventListResponse(BaseModel):
    username: str
    items: list[EventItem]


class DeleteEventResponse(BaseModel):
    id: str
    deleted: bool
