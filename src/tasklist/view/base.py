"""View contract shared by the controller and concrete views.

A view is two things to the controller: a sink for :class:`RenderCommand`
values (``render``) and a source of :class:`Intent` values (``bind``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Union


class Intent(str, Enum):
    """User actions a view can raise."""

    NEW_TODO = "newTodo"
    ITEM_EDIT = "itemEdit"
    ITEM_EDIT_DONE = "itemEditDone"
    ITEM_EDIT_CANCEL = "itemEditCancel"
    ITEM_REMOVE = "itemRemove"
    ITEM_TOGGLE = "itemToggle"
    TOGGLE_ALL = "toggleAll"
    REMOVE_COMPLETED = "removeCompleted"


class RenderCommand(str, Enum):
    """Display instructions the controller sends to a view."""

    SHOW_ENTRIES = "showEntries"
    REMOVE_ITEM = "removeItem"
    UPDATE_ELEMENT_COUNT = "updateElementCount"
    CLEAR_COMPLETED_BUTTON = "clearCompletedButton"
    CONTENT_BLOCK_VISIBILITY = "contentBlockVisibility"
    TOGGLE_ALL = "toggleAll"
    SET_FILTER = "setFilter"
    CLEAR_NEW_TODO = "clearNewTodo"
    ELEMENT_COMPLETE = "elementComplete"
    EDIT_ITEM = "editItem"
    EDIT_ITEM_DONE = "editItemDone"


Handler = Callable[..., Any]

# RenderCommand -> View method name.
_RENDERERS: dict[RenderCommand, str] = {
    RenderCommand.SHOW_ENTRIES: "show_entries",
    RenderCommand.REMOVE_ITEM: "remove_item",
    RenderCommand.UPDATE_ELEMENT_COUNT: "update_element_count",
    RenderCommand.CLEAR_COMPLETED_BUTTON: "clear_completed_button",
    RenderCommand.CONTENT_BLOCK_VISIBILITY: "content_block_visibility",
    RenderCommand.TOGGLE_ALL: "toggle_all",
    RenderCommand.SET_FILTER: "set_filter",
    RenderCommand.CLEAR_NEW_TODO: "clear_new_todo",
    RenderCommand.ELEMENT_COMPLETE: "element_complete",
    RenderCommand.EDIT_ITEM: "edit_item",
    RenderCommand.EDIT_ITEM_DONE: "edit_item_done",
}

_missing = set(RenderCommand) - set(_RENDERERS)
if _missing:  # pragma: no cover - guards edits to RenderCommand
    raise RuntimeError(f"RenderCommand values without a renderer: {sorted(m.value for m in _missing)}")


class View(ABC):
    """Base class for views.

    Subclasses implement one method per :class:`RenderCommand`; leaving one
    out makes the subclass abstract, so it cannot be instantiated.
    """

    def __init__(self) -> None:
        self._handlers: dict[Intent, Handler] = {}

    def bind(self, intent: Union[Intent, str], handler: Handler) -> None:
        self._handlers[Intent(intent)] = handler

    def trigger(self, intent: Union[Intent, str], *args: Any) -> Any:
        """Raise *intent* as if the user had performed it."""
        key = Intent(intent)
        handler = self._handlers.get(key)
        if handler is None:
            raise KeyError(f"No handler bound for intent {key.value!r}")
        return handler(*args)

    def render(self, command: Union[RenderCommand, str], payload: Any = None) -> None:
        getattr(self, _RENDERERS[RenderCommand(command)])(payload)

    @abstractmethod
    def show_entries(self, entries: list[dict[str, Any]]) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_item(self, id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_element_count(self, active: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear_completed_button(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def content_block_visibility(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def toggle_all(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_filter(self, current_page: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear_new_todo(self, _: Any = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def element_complete(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def edit_item(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def edit_item_done(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError
