"""Board game catalog API client package."""

from bgg_client.base import BaseClient
from bgg_client.client import CatalogClient
from bgg_client.errors import (
    CatalogError,
    CatalogNotFoundError,
    CatalogPendingError,
    CatalogUnavailableError,
)
from bgg_client.limiter import RateLimiter, shared_limiter
from bgg_client.parser import field_value, parse_collection, parse_things
from bgg_client.schemas import GameDetail, GameSummary, to_record

__all__ = [
    # Clients
    "BaseClient",
    "CatalogClient",
    # Rate limiting
    "RateLimiter",
    "shared_limiter",
    # Errors
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogPendingError",
    "CatalogUnavailableError",
    # Parsing
    "field_value",
    "parse_collection",
    "parse_things",
    # Schemas
    "GameSummary",
    "GameDetail",
    "to_record",
]
