"""Health API."""

from web.api.health.views import get_health

__all__ = ["get_health"]
