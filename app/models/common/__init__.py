"""Common models shared across domains."""

from app.models.common.base import BaseEntity
from app.models.common.cache import CacheEntry, CacheMetadata, CacheStats, SweepResult

__all__ = [
    "BaseEntity",
    "CacheEntry",
    "CacheMetadata",
    "CacheStats",
    "SweepResult",
]
