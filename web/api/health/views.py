"""Health API view."""

from datetime import datetime, timezone

from app.container import container

from .schemas import HealthResponse


async def get_health() -> HealthResponse:
    cache_stats = await container.cache.stats()
    event_stats = await container.event_store.stats()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        cache_backend=container.cache.backend,
        cache_entries=cache_stats.count,
        cache_size=cache_stats.total_size,
        event_count=event_stats["eventCount"],
    )
