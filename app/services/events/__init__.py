"""Event services."""

from app.services.events.aggregator import VoteAggregator
from app.services.events.service import EventService

__all__ = ["EventService", "VoteAggregator"]
