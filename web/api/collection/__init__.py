"""Collection API."""

from web.api.collection.views import get_collection, refresh_collection

__all__ = ["get_collection", "refresh_collection"]
