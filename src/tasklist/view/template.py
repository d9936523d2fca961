"""Text fragments used by the console view."""

from __future__ import annotations

from typing import Any, Optional

from rich.markup import escape
from rich.table import Table


def item_counter(active: int) -> str:
    """``"1 item left"`` / ``"3 items left"``."""
    plural = "" if active == 1 else "s"
    return f"{active} item{plural} left"


def clear_completed_button(completed: int) -> str:
    return "Clear completed" if completed > 0 else ""


def show(entries: list[dict[str, Any]], *, editing: Optional[int] = None, draft: str = "") -> Table:
    """Build the table of todo rows.

    The row being edited shows the draft title instead of the stored one.
    """
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("", width=3)
    table.add_column("Title")
    for entry in entries:
        completed = bool(entry.get("completed"))
        mark = "[green]✓[/green]" if completed else "·"
        title = escape(str(entry.get("title") or ""))
        if entry.get("id") == editing:
            title = f"[yellow]✎ {escape(draft)}[/yellow]"
        elif completed:
            title = f"[strike dim]{title}[/strike dim]"
        table.add_row(str(entry.get("id", "")), mark, title)
    return table
