from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config import get_storage_config, get_store_name, state_dir
from .constants import DEFAULT_STORE_NAME, STORE_DIR
from .controller import Controller
from .model import TodoModel
from .storage import FileKeyValueBackend, KeyValueBackend, MemoryKeyValueBackend, TodoStore
from .view import ConsoleView, View


class TodoApp:
    """Everything one running task list needs, built once and shared by reference."""

    def __init__(self, store: TodoStore, view: Optional[View] = None) -> None:
        self.store = store
        self.model = TodoModel(store)
        self.view = view if view is not None else ConsoleView()
        self.controller = Controller(self.model, self.view)

    @classmethod
    def from_config(
        cls,
        project_dir: Path,
        config: Optional[dict[str, Any]] = None,
        *,
        view: Optional[View] = None,
    ) -> "TodoApp":
        config = config or {}
        storage = get_storage_config(config)
        backend: KeyValueBackend
        if storage["backend"] == "memory":
            backend = MemoryKeyValueBackend()
        else:
            backend = FileKeyValueBackend(state_dir(project_dir) / STORE_DIR, suffix=f".{storage['format']}")
        store = TodoStore(
            get_store_name(config),
            backend,
            fmt=storage["format"],
            on_corrupt=storage["on_corrupt"],
        )
        return cls(store, view)

    @classmethod
    def in_memory(cls, name: str = DEFAULT_STORE_NAME, *, view: Optional[View] = None) -> "TodoApp":
        return cls(TodoStore(name, MemoryKeyValueBackend()), view)

    def navigate(self, route: str = "") -> None:
        """Router entry point: call on load and on every route change."""
        self.controller.set_view(route)
