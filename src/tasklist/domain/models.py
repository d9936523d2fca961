from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class Filter(str, Enum):
    """Subset of the list selected by the current route."""

    ALL = ""
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_route(cls, route: Optional[str]) -> "Filter":
        """Map a navigation fragment such as ``#/active`` to a filter.

        Only ``#/active`` and ``#/completed`` (with an optional trailing slash)
        select a subset; anything else selects ``ALL``.
        """
        fragment = (route or "").strip().removesuffix("/")
        for member in (cls.ACTIVE, cls.COMPLETED):
            if fragment == f"#/{member.value}":
                return member
        return cls.ALL

    @property
    def predicate(self) -> Optional[dict[str, Any]]:
        if self is Filter.ACTIVE:
            return {"completed": False}
        if self is Filter.COMPLETED:
            return {"completed": True}
        return None


@dataclass
class TodoItem:
    id: int
    title: str = ""
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TodoItem":
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class TodoCounts:
    active: int = 0
    completed: int = 0
    total: int = 0

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> "TodoCounts":
        completed = len([r for r in records if r.get("completed")])
        return cls(active=len(records) - completed, completed=completed, total=len(records))
