"""Todo model: the operations the controller is allowed to perform.

Wraps a :class:`~tasklist.storage.store.TodoStore` so the controller deals
in titles, ids and counts instead of raw store calls.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from .domain.models import TodoCounts
from .storage.store import Callback, Record, TodoStore

Query = Union[None, int, str, dict[str, Any]]


class TodoModel:
    def __init__(self, store: TodoStore) -> None:
        self.store = store

    def create(self, title: Optional[str], callback: Callback = None) -> list[Record]:
        """Persist a new, not yet completed todo and return ``[record]``."""
        item = {"title": (title or "").strip(), "completed": False}
        return self.store.upsert(item, callback)

    def read(self, query: Query = None, callback: Callback = None) -> list[Record]:
        """Fetch todos.

        ``None`` returns every todo, an ``int`` (or numeric string) looks up a
        single id, and a mapping is used as a field-equality predicate.
        """
        if query is None:
            return self.store.query_all(callback)
        if isinstance(query, bool):
            raise TypeError("read() query must be an id or a mapping, not bool")
        if isinstance(query, (int, str)):
            return self.store.query({"id": int(query)}, callback)
        return self.store.query(dict(query), callback)

    def update(self, id: int, data: dict[str, Any], callback: Callback = None) -> list[Record]:
        return self.store.upsert(data, callback, id)

    def remove(self, id: int, callback: Callback = None) -> list[Record]:
        return self.store.remove(id, callback)

    def remove_all(self, callback: Callback = None) -> list[Record]:
        return self.store.drop_all(callback)

    def get_count(self, callback: Optional[Callable[[TodoCounts], Any]] = None) -> TodoCounts:
        counts = TodoCounts.from_records(self.store.query_all())
        if callback is not None:
            callback(counts)
        return counts
