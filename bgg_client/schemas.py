"""Catalog record schemas."""

from pydantic import BaseModel, Field


class GameSummary(BaseModel):
    """Owned collection item (lightweight listing)."""

    id: str
    name: str
    year_published: int | None = Field(alias="yearPublished", default=None)
    thumbnail: str | None = None
    image: str | None = None
    detailed: bool = False

    class Config:
        populate_by_name = True


class GameDetail(GameSummary):
    """Full thing record with stats."""

    description: str | None = None
    min_players: int | None = Field(alias="minPlayers", default=None)
    max_players: int | None = Field(alias="maxPlayers", default=None)
    playing_time: int | None = Field(alias="playingTime", default=None)
    min_play_time: int | None = Field(alias="minPlayTime", default=None)
    max_play_time: int | None = Field(alias="maxPlayTime", default=None)
    min_age: int | None = Field(alias="minAge", default=None)
    rating: float | None = None
    weight: float | None = None
    best_player_count: int | None = Field(alias="bestPlayerCount", default=None)
    categories: list[str] = []
    mechanics: list[str] = []
    is_expansion: bool = Field(alias="isExpansion", default=False)
    is_cooperative: bool = Field(alias="isCooperative", default=False)
    detailed: bool = True

    class Config:
        populate_by_name = True


def to_record(game: GameSummary) -> dict:
    """Serialize a catalog record the way it is cached."""
    return game.model_dump(by_alias=True)
