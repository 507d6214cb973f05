"""Cache entry records - the on-disk envelope around a cached payload."""

from dataclasses import dataclass
from typing import Any

from app.models.common.base import BaseEntity


@dataclass
class CacheMetadata(BaseEntity):
    """Envelope metadata. Timestamps and TTLs are in milliseconds."""

    key: str
    timestamp: int
    ttl: int
    size: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp

    def is_expired(self, now_ms: int, ttl: int | None = None) -> bool:
        """Expired when age exceeds the given TTL, else the stored one."""
        return self.age_ms(now_ms) > (ttl if ttl is not None else self.ttl)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheMetadata":
        return cls(
            key=str(data["key"]),
            timestamp=int(data["timestamp"]),
            ttl=int(data["ttl"]),
            size=int(data["size"]),
        )


@dataclass
class CacheEntry(BaseEntity):
    """A whole cache file: metadata plus the opaque JSON payload."""

    metadata: CacheMetadata
    data: Any

    @classmethod
    def from_dict(cls, raw: Any) -> "CacheEntry":
        """Build from a decoded file; raises KeyError/TypeError/ValueError if malformed."""
        if not isinstance(raw, dict) or "data" not in raw:
            raise ValueError("not a cache entry")
        return cls(metadata=CacheMetadata.from_dict(raw["metadata"]), data=raw["data"])


@dataclass
class CacheStats(BaseEntity):
    """Entry count and bytes on disk."""

    count: int
    total_size: int


@dataclass
class SweepResult(BaseEntity):
    """Outcome of one sweep pass."""

    deleted_count: int = 0
    deleted_size: int = 0
    remaining_size: int = 0
