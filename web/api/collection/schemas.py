"""Collection API response schemas."""

from pydantic import BaseModel


class CollectionResponse(BaseModel):
    """A user's owned games."""

    username: str
    games: list[dict]
    from_cache: bool


class RefreshResponse(BaseModel):
    """Change summary after a forced sync."""

    username: str
    has_new_games: bool
    total_games: int
    new_games_count: int
    removed_games_count: int
    new_games: list[dict]
    all_games: list[dict]
