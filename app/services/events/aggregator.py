"""Vote aggregation - Borda leaderboard for an event."""

from loguru import logger

from app.models.events import Event, ScoredGame
from helpers import formulas


class VoteAggregator:
    """Scores an event's ballots against its *current* game list.

    Points depend on how many games the event has now, not when a ballot
    was cast, so adding or removing a game rescores every ballot.
    """

    def scores(self, event: Event) -> list[ScoredGame]:
        totals = formulas.borda_count(event.game_ids(), event.votes.values())
        result = [
            ScoredGame(game_id=g.id, name=g.name, score=totals[g.id][0], vote_count=totals[g.id][1])
            for g in event.games
        ]
        logger.debug("Scored {} games from {} ballots for event {}", len(result), len(event.votes), event.id)
        return sorted(result, key=lambda x: x.score, reverse=True)
