"""Collection domain models."""

from app.models.collection.entities import SyncResult

__all__ = ["SyncResult"]
