"""Health API response schemas."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service health and storage stats."""

    status: str
    timestamp: datetime
    cache_backend: str
    cache_entries: int
    cache_size: int
    event_count: int
