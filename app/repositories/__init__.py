"""Repositories package - file-backed storage for cache entries and events."""

from app.repositories.base import BaseRepository
from app.repositories.common import KeyedFileCache, MemoryCache, WriteState
from app.repositories.events import EventStore

__all__ = [
    # Base
    "BaseRepository",
    # Cache
    "KeyedFileCache",
    "MemoryCache",
    "WriteState",
    # Events
    "EventStore",
]
