"""Collection sync entities."""

from dataclasses import dataclass, field

from app.models.common import BaseEntity


@dataclass
class SyncResult(BaseEntity):
    """Change summary of one collection sync."""

    has_new_games: bool
    total_games: int
    new_games_count: int
    removed_games_count: int
    new_games: list[dict] = field(default_factory=list)
    all_games: list[dict] = field(default_factory=list)
