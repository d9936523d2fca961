"""Controller mediating between the todo model and a view.

The controller keeps no copy of the todos.  Every route change and every
mutation re-reads what it needs from the model and tells the view what to
draw through :class:`~tasklist.view.base.RenderCommand` values.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from loguru import logger

from .domain.models import Filter, TodoCounts
from .view.base import Intent, RenderCommand


class ModelLike(Protocol):
    def create(self, title: Optional[str], callback: Any = None) -> list[dict[str, Any]]: ...

    def read(self, query: Any = None, callback: Any = None) -> list[dict[str, Any]]: ...

    def update(self, id: int, data: dict[str, Any], callback: Any = None) -> list[dict[str, Any]]: ...

    def remove(self, id: int, callback: Any = None) -> list[dict[str, Any]]: ...

    def get_count(self, callback: Any = None) -> TodoCounts: ...


class ViewLike(Protocol):
    def bind(self, intent: Intent, handler: Callable[..., Any]) -> None: ...

    def render(self, command: RenderCommand, payload: Any = None) -> None: ...


def _item_id(payload: dict[str, Any]) -> int:
    return int(payload["id"])


class Controller:
    def __init__(self, model: ModelLike, view: ViewLike) -> None:
        self.model = model
        self.view = view
        self.active_filter = Filter.ALL

        handlers: dict[Intent, Callable[..., None]] = {
            Intent.NEW_TODO: self.add_item,
            Intent.ITEM_EDIT: self.edit_item,
            Intent.ITEM_EDIT_DONE: self.edit_item_save,
            Intent.ITEM_EDIT_CANCEL: self.edit_item_cancel,
            Intent.ITEM_REMOVE: self.remove_item,
            Intent.ITEM_TOGGLE: self.toggle_complete,
            Intent.TOGGLE_ALL: self.toggle_all,
            Intent.REMOVE_COMPLETED: self.remove_completed_items,
        }
        missing = set(Intent) - set(handlers)
        if missing:
            raise RuntimeError(f"Intents without a handler: {sorted(i.value for i in missing)}")
        for intent, handler in handlers.items():
            self.view.bind(intent, handler)

    # -- routing ------------------------------------------------------------

    def set_view(self, route: Optional[str] = "") -> None:
        """Show the todos selected by *route* (``""``, ``#/active``, ...)."""
        self.active_filter = Filter.from_route(route)
        logger.debug("Route {!r} -> filter {!r}", route, self.active_filter.value or "all")
        self._filter(force=True)
        self.view.render(RenderCommand.SET_FILTER, self.active_filter.value)

    def _show_entries(self) -> None:
        predicate = self.active_filter.predicate
        todos = self.model.read(predicate) if predicate is not None else self.model.read()
        self.view.render(RenderCommand.SHOW_ENTRIES, todos)

    def _update_count(self) -> None:
        counts = self.model.get_count()
        self.view.render(RenderCommand.UPDATE_ELEMENT_COUNT, counts.active)
        self.view.render(
            RenderCommand.CLEAR_COMPLETED_BUTTON,
            {"completed": counts.completed, "visible": counts.completed > 0},
        )
        self.view.render(RenderCommand.CONTENT_BLOCK_VISIBILITY, {"visible": counts.total > 0})
        self.view.render(RenderCommand.TOGGLE_ALL, {"checked": counts.active == 0 and counts.total > 0})

    def _filter(self, force: bool = False) -> None:
        # Outside "all", a mutation can change which todos the filter selects.
        if force or self.active_filter is not Filter.ALL:
            self._show_entries()
        self._update_count()

    # -- intents ------------------------------------------------------------

    def add_item(self, title: Optional[str]) -> None:
        if not (title or "").strip():
            return
        self.model.create(title)
        self._filter(force=True)
        self.view.render(RenderCommand.CLEAR_NEW_TODO)

    def edit_item(self, payload: dict[str, Any]) -> None:
        id = _item_id(payload)
        for item in self.model.read(id):
            self.view.render(RenderCommand.EDIT_ITEM, {"id": id, "title": item["title"]})

    def edit_item_save(self, payload: dict[str, Any]) -> None:
        id = _item_id(payload)
        title = (payload.get("title") or "").strip()
        if not title:
            self.remove_item({"id": id})
            return
        self.model.update(id, {"title": title})
        self.view.render(RenderCommand.EDIT_ITEM_DONE, {"id": id, "title": title})

    def edit_item_cancel(self, payload: dict[str, Any]) -> None:
        id = _item_id(payload)
        for item in self.model.read(id):
            self.view.render(RenderCommand.EDIT_ITEM_DONE, {"id": id, "title": item["title"]})

    def remove_item(self, payload: dict[str, Any]) -> None:
        id = _item_id(payload)
        self.model.remove(id)
        self.view.render(RenderCommand.REMOVE_ITEM, id)
        self._filter()

    def remove_completed_items(self) -> None:
        for item in self.model.read({"completed": True}):
            self.model.remove(item["id"])
            self.view.render(RenderCommand.REMOVE_ITEM, item["id"])
        self._filter()

    def toggle_complete(self, payload: dict[str, Any], silent: bool = False) -> None:
        """Set one todo's completed flag; ``silent`` skips the count refresh."""
        id = _item_id(payload)
        completed = bool(payload["completed"])
        self.model.update(id, {"completed": completed})
        self.view.render(RenderCommand.ELEMENT_COMPLETE, {"id": id, "completed": completed})
        if not silent:
            self._filter()

    def toggle_all(self, payload: dict[str, Any]) -> None:
        completed = bool(payload["completed"])
        for item in self.model.read():
            self.toggle_complete({"id": item["id"], "completed": completed}, silent=True)
        self._filter()
