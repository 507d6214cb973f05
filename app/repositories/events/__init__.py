"""Event repositories."""

from app.repositories.events.store import EventStore, new_creator_token, new_event_id

__all__ = ["EventStore", "new_creator_token", "new_event_id"]
