"""Collection API views - thin layer over services."""

from app.container import container
from bgg_client import CatalogError, CatalogNotFoundError
from web.api.errors import NotFoundError, UpstreamUnavailableError, validate_username

from .schemas import CollectionResponse, RefreshResponse


async def get_collection(username: str) -> CollectionResponse:
    """Get a collection, from cache when possible."""
    username = validate_username(username)
    try:
        data = await container.collections.get_collection(username)
    except CatalogNotFoundError as e:
        raise NotFoundError(f"Collection for '{username}' not found or private") from e
    except CatalogError as e:
        raise UpstreamUnavailableError(e.message) from e

    return CollectionResponse(
        username=data["username"],
        games=data["games"],
        from_cache=data["fromCache"],
    )


async def refresh_collection(username: str) -> RefreshResponse:
    """Force a sync and report what changed."""
    username = validate_username(username)
    try:
        result = await container.collections.refresh(username)
    except CatalogNotFoundError as e:
        raise NotFoundError(f"Collection for '{username}' not found or private") from e
    except CatalogError as e:
        raise UpstreamUnavailableError(e.message) from e

    return RefreshResponse(username=username, **result.to_dict())
