"""Services package - service class exports."""

from app.services.collection import CollectionService
from app.services.events import EventService, VoteAggregator

__all__ = [
    "CollectionService",
    "EventService",
    "VoteAggregator",
]
