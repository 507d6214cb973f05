"""Base entity class for computed domain entities."""

from dataclasses import asdict, dataclass, fields
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


@dataclass
class BaseEntity:
    """Base class for all entities."""

    def to_dict(self, camel: bool = False) -> dict[str, Any]:
        """Convert entity to dictionary, optionally with camelCase keys."""
        data = asdict(self)
        if not camel:
            return data
        return {_camel(f.name): data[f.name] for f in fields(self)}
