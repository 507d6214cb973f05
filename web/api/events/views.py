"""Event API views - token checks at the boundary, thin layer over services.

Mutations other than voting require the creator token, which the HTTP layer
reads from the ``X-Creator-Token`` header and passes in as ``token``.
"""

from app.container import container
from app.models.events import Event, GameRef
from web.api.errors import NotFoundError, UnauthorizedError, ValidationError, validate_payload, validate_username

from .schemas import (
    AddGameRequest,
    CreatedEventResponse,
    CreateEventRequest,
    DeleteEventResponse,
    EventDetailsResponse,
    EventItem,
    EventListResponse,
    RenameEventRequest,
    ScoreItem,
    VoteRequest,
)

CREATOR_TOKEN_HEADER = "X-Creator-Token"


def _item(event: Event) -> EventItem:
    return EventItem(**event.model_dump(exclude={"creator_token"}))


async def _require_event(event_id: str) -> Event:
    event = await container.events.get(event_id)
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    return event


async def _require_creator(event_id: str, token: str | None, action: str) -> Event:
    event = await _require_event(event_id)
    if not token:
        raise UnauthorizedError(f"Creator token required to {action}")
    if not await container.events.verify_token(event_id, token):
        raise UnauthorizedError(f"Only the event creator can {action}")
    return event


async def create_event(payload: dict) -> CreatedEventResponse:
    """Create an event; the response carries the creator token once."""
    req = validate_payload(CreateEventRequest, payload)
    if not req.created_by.strip():
        raise ValidationError("createdBy is required")
    event = await container.events.create(req.created_by, name=req.name, scenario=req.scenario)
    return CreatedEventResponse(**event.model_dump())


async def get_event(event_id: str, token: str | None = None) -> EventDetailsResponse:
    """Public event with live Borda scores."""
    data = await container.events.details(event_id, token)
    if data is None:
        raise NotFoundError(f"Event {event_id} not found")

    return EventDetailsResponse(
        event=_item(data["event"]),
        scores=[ScoreItem(**s.to_dict()) for s in data["scores"]],
        voter_count=data["voter_count"],
        is_creator=data["is_creator"],
    )


async def list_user_events(username: str) -> EventListResponse:
    username = validate_username(username)
    events = await container.events.list_for_user(username)
    return EventListResponse(username=username, items=[_item(e) for e in events])


async def rename_event(event_id: str, payload: dict, token: str | None) -> EventItem:
    await _require_creator(event_id, token, "rename this event")
    req = validate_payload(RenameEventRequest, payload)
    event = await container.events.rename(event_id, req.name.strip())
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    return _item(event)


async def delete_event(event_id: str, token: str | None) -> DeleteEventResponse:
    await _require_creator(event_id, token, "delete this event")
    deleted = await container.events.delete(event_id)
    if not deleted:
        raise NotFoundError(f"Event {event_id} not found")
    return DeleteEventResponse(id=event_id, deleted=True)


async def add_game(event_id: str, payload: dict, token: str | None) -> EventItem:
    await _require_creator(event_id, token, "add games")
    req = validate_payload(AddGameRequest, payload)
    game = GameRef(**req.model_dump())
    event = await container.events.add_game(event_id, game)
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    return _item(event)


async def remove_game(event_id: str, game_id: str, token: str | None) -> EventItem:
    event = await _require_creator(event_id, token, "remove games")
    if not event.has_game(game_id):
        raise NotFoundError(f"Game {game_id} is not in event {event_id}")
    event = await container.events.remove_game(event_id, game_id)
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    return _item(event)


async def vote(event_id: str, payload: dict) -> EventDetailsResponse:
    """Submit or replace a ballot. Open to anyone with the event link."""
    req = validate_payload(VoteRequest, payload)
    await _require_event(event_id)
    if await container.events.vote(event_id, req.fingerprint, req.rankings) is None:
        raise NotFoundError(f"Event {event_id} not found")
    return await get_event(event_id)
