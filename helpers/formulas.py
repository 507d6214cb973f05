"""Ranking formulas - pure functions, no I/O."""

from collections.abc import Iterable, Sequence


def borda_points(num_candidates: int, rank: int) -> int:
    """Points for the 0-indexed ``rank`` among ``num_candidates``."""
    return num_candidates - rank


def borda_count(
    candidates: Sequence[str],
    ballots: Iterable[Sequence[str]],
) -> dict[str, tuple[int, int]]:
    """Borda count over ranked (possibly partial) ballots.

    The candidate at rank i of a ballot earns ``len(candidates) - i`` points
    and one mention. Repeats within a ballot count once, at their first rank.
    Ballot entries that aren't candidates are ignored.
    Returns ``{candidate: (score, mentions)}`` in ``candidates`` order.
    """
    n = len(candidates)
    totals = {c: [0, 0] for c in candidates}
    for ballot in ballots:
        for rank, candidate in enumerate(dict.fromkeys(ballot)):
            if candidate in totals:
                totals[candidate][0] += borda_points(n, rank)
                totals[candidate][1] += 1
    return {c: (score, mentions) for c, (score, mentions) in totals.items()}
