"""Event domain models."""

from app.models.events.entities import ScoredGame
from app.models.events.event import (
    DEFAULT_EVENT_NAME,
    Event,
    Experience,
    GameRef,
    Mood,
    ScenarioFilters,
)

__all__ = [
    "DEFAULT_EVENT_NAME",
    "Event",
    "Experience",
    "GameRef",
    "Mood",
    "ScenarioFilters",
    "ScoredGame",
]
