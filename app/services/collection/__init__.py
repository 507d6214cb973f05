"""Collection services."""

from app.services.collection.service import CollectionService

__all__ = ["CollectionService"]
