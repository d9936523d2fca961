"""Terminal view rendered with rich.

Render commands update an in-memory screen model; :meth:`ConsoleView.draw`
prints that model.  This mirrors what a browser view would do to its DOM.
"""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console

from ..domain.models import Filter
from . import template
from .base import View

_FILTER_LABELS = [(Filter.ALL, "All"), (Filter.ACTIVE, "Active"), (Filter.COMPLETED, "Completed")]


class ConsoleView(View):
    def __init__(self, console: Optional[Console] = None) -> None:
        super().__init__()
        self.console = console or Console()
        self.entries: list[dict[str, Any]] = []
        self.counter = template.item_counter(0)
        self.clear_completed_label = ""
        self.clear_completed_visible = False
        self.content_visible = False
        self.toggle_all_checked = False
        self.current_filter = Filter.ALL.value
        self.new_todo = ""
        self.editing: Optional[int] = None
        self.draft = ""

    def _entry(self, id: int) -> Optional[dict[str, Any]]:
        for entry in self.entries:
            if entry.get("id") == id:
                return entry
        return None

    # -- render commands ----------------------------------------------------

    def show_entries(self, entries: list[dict[str, Any]]) -> None:
        self.entries = [dict(entry) for entry in entries]

    def remove_item(self, id: int) -> None:
        self.entries = [entry for entry in self.entries if entry.get("id") != id]
        if self.editing == id:
            self.editing = None

    def update_element_count(self, active: int) -> None:
        self.counter = template.item_counter(active)

    def clear_completed_button(self, payload: dict[str, Any]) -> None:
        self.clear_completed_label = template.clear_completed_button(payload["completed"])
        self.clear_completed_visible = bool(payload["visible"])

    def content_block_visibility(self, payload: dict[str, Any]) -> None:
        self.content_visible = bool(payload["visible"])

    def toggle_all(self, payload: dict[str, Any]) -> None:
        self.toggle_all_checked = bool(payload["checked"])

    def set_filter(self, current_page: str) -> None:
        self.current_filter = current_page

    def clear_new_todo(self, _: Any = None) -> None:
        self.new_todo = ""

    def element_complete(self, payload: dict[str, Any]) -> None:
        entry = self._entry(payload["id"])
        if entry is not None:
            entry["completed"] = bool(payload["completed"])

    def edit_item(self, payload: dict[str, Any]) -> None:
        if self._entry(payload["id"]) is None:
            return
        self.editing = payload["id"]
        self.draft = payload["title"]

    def edit_item_done(self, payload: dict[str, Any]) -> None:
        entry = self._entry(payload["id"])
        if entry is None:
            return
        entry["title"] = payload["title"]
        if self.editing == payload["id"]:
            self.editing = None
            self.draft = ""

    # -- output -------------------------------------------------------------

    def draw(self) -> None:
        if not self.content_visible:
            self.console.print("[dim]Nothing to do.[/dim]")
            return
        toggle = "[green]✓[/green]" if self.toggle_all_checked else "·"
        self.console.print(f"{toggle} [bold]todos[/bold]")
        self.console.print(template.show(self.entries, editing=self.editing, draft=self.draft))
        filters = "  ".join(
            f"[reverse]{label}[/reverse]" if value.value == self.current_filter else label
            for value, label in _FILTER_LABELS
        )
        footer = f"{self.counter}   {filters}"
        if self.clear_completed_visible:
            footer += f"   [dim]{self.clear_completed_label}[/dim]"
        self.console.print(footer)
