"""Models package - stored records and computed entities for all domains."""

from app.models.collection import SyncResult
from app.models.common import (
    BaseEntity,
    CacheEntry,
    CacheMetadata,
    CacheStats,
    SweepResult,
)
from app.models.events import (
    DEFAULT_EVENT_NAME,
    Event,
    GameRef,
    ScenarioFilters,
    ScoredGame,
)

__all__ = [
    # Common
    "BaseEntity",
    "CacheEntry",
    "CacheMetadata",
    "CacheStats",
    "SweepResult",
    # Events
    "DEFAULT_EVENT_NAME",
    "Event",
    "GameRef",
    "ScenarioFilters",
    "ScoredGame",
    # Collection
    "SyncResult",
]
