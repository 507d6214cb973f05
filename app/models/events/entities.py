"""Event domain entities - computed results."""

from dataclasses import dataclass

from app.models.common import BaseEntity


@dataclass
class ScoredGame(BaseEntity):
    """Borda ranking row for one game, recomputed on every read."""

    game_id: str
    name: str
    score: int
    vote_count: int
