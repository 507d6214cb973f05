"""Cache repositories."""

from app.repositories.common.cache import KeyedFileCache, WriteState
from app.repositories.common.memory import MemoryCache

__all__ = ["KeyedFileCache", "MemoryCache", "WriteState"]
