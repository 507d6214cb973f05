"""ETL helper functions."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class IdDiff:
    """Ids that appeared / disappeared between two listings, in listing order."""

    added: list[str]
    removed: list[str]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def unique_ids(ids: Iterable) -> list[str]:
    """Stringified ids with duplicates dropped, first occurrence wins."""
    return list(dict.fromkeys(str(i) for i in ids))


def unique_by_id(records: Iterable[dict]) -> list[dict]:
    """Records with duplicate or missing ``id`` dropped, first occurrence wins."""
    seen: dict[str, dict] = {}
    for record in records:
        if not isinstance(record, dict) or record.get("id") is None:
            continue
        game_id = str(record["id"])
        if game_id not in seen:
            seen[game_id] = {**record, "id": game_id}
    return list(seen.values())


def diff_ids(cached: Sequence[str], current: Sequence[str]) -> IdDiff:
    cached_set, current_set = set(cached), set(current)
    return IdDiff(
        added=[i for i in current if i not in cached_set],
        removed=[i for i in cached if i not in current_set],
    )


def batched(items: Sequence[str], size: int) -> Iterator[list[str]]:
    for i in range(0, len(items), size):
        yield list(items[i : i + size])
