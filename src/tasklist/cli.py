"""Command line front end for the task list.

Each subcommand loads the list at the requested route, raises one intent on
the console view, and draws the result.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .app import TodoApp
from .config import VALID_LOG_LEVELS, get_log_level, load_config
from .constants import ROUTE_ACTIVE, ROUTE_ALL, ROUTE_COMPLETED
from .domain.models import TodoItem
from .storage import StorageError
from .view import ConsoleView, Intent

_ROUTES = {"all": ROUTE_ALL, "active": ROUTE_ACTIVE, "completed": ROUTE_COMPLETED}


def _configure_logging(level: str) -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan> - "
            "{message}"
        ),
    )


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    return Path(project_dir).expanduser().resolve() if project_dir else Path.cwd().resolve()


def _open(args: argparse.Namespace) -> TodoApp:
    app = TodoApp.from_config(_resolve_project_dir(args.project_dir), args.config, view=ConsoleView())
    app.navigate(_ROUTES[args.filter])
    return app


def _finish(app: TodoApp, args: argparse.Namespace) -> int:
    app.navigate(_ROUTES[args.filter])
    if isinstance(app.view, ConsoleView):
        app.view.draw()
    return 0


def _exists(app: TodoApp, todo_id: int) -> bool:
    if app.model.read(todo_id):
        return True
    sys.stderr.write(f"No todo with id {todo_id}\n")
    return False


def _list(args: argparse.Namespace) -> int:
    if args.which:
        args.filter = args.which
    return _finish(_open(args), args)


def _add(args: argparse.Namespace) -> int:
    app = _open(args)
    if not args.title.strip():
        sys.stderr.write("Title must not be blank\n")
        return 1
    app.view.trigger(Intent.NEW_TODO, args.title)
    return _finish(app, args)


def _toggle(args: argparse.Namespace) -> int:
    app = _open(args)
    items = app.model.read(args.id)
    if not items:
        sys.stderr.write(f"No todo with id {args.id}\n")
        return 1
    item = TodoItem.from_dict(items[0])
    app.view.trigger(Intent.ITEM_TOGGLE, {"id": item.id, "completed": not item.completed})
    return _finish(app, args)


def _set_completed(args: argparse.Namespace) -> int:
    app = _open(args)
    if not _exists(app, args.id):
        return 1
    app.view.trigger(Intent.ITEM_TOGGLE, {"id": args.id, "completed": args.completed})
    return _finish(app, args)


def _toggle_all(args: argparse.Namespace) -> int:
    app = _open(args)
    app.view.trigger(Intent.TOGGLE_ALL, {"completed": not args.undo})
    return _finish(app, args)


def _edit(args: argparse.Namespace) -> int:
    app = _open(args)
    if not _exists(app, args.id):
        return 1
    app.view.trigger(Intent.ITEM_EDIT, {"id": args.id})
    app.view.trigger(Intent.ITEM_EDIT_DONE, {"id": args.id, "title": args.title})
    return _finish(app, args)


def _remove(args: argparse.Namespace) -> int:
    app = _open(args)
    if not _exists(app, args.id):
        return 1
    app.view.trigger(Intent.ITEM_REMOVE, {"id": args.id})
    return _finish(app, args)


def _clear_completed(args: argparse.Namespace) -> int:
    app = _open(args)
    app.view.trigger(Intent.REMOVE_COMPLETED)
    return _finish(app, args)


def _drop(args: argparse.Namespace) -> int:
    app = _open(args)
    app.store.drop_all()
    return _finish(app, args)


def _export(args: argparse.Namespace) -> int:
    app = _open(args)
    sys.stdout.write(json.dumps({"todos": app.store.query_all()}, indent=2) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Single-list todo manager")
    parser.add_argument('--project-dir', default=None, help='Directory holding .tasklist/ (default: current working directory)')
    parser.add_argument('--log-level', default=None, type=str.upper, choices=sorted(VALID_LOG_LEVELS), help='Log level (default: config log_level or WARNING)')
    parser.add_argument('--filter', default='all', choices=sorted(_ROUTES), help='Which todos to show afterwards')
    subparsers = parser.add_subparsers(dest='command', required=True)

    plist = subparsers.add_parser('list', help='Show todos')
    plist.add_argument('which', nargs='?', default=None, choices=sorted(_ROUTES))
    plist.set_defaults(func=_list)

    padd = subparsers.add_parser('add', help='Add a todo')
    padd.add_argument('title')
    padd.set_defaults(func=_add)

    ptoggle = subparsers.add_parser('toggle', help='Flip a todo between active and completed')
    ptoggle.add_argument('id', type=int)
    ptoggle.set_defaults(func=_toggle)

    pdone = subparsers.add_parser('done', help='Mark a todo completed')
    pdone.add_argument('id', type=int)
    pdone.set_defaults(func=_set_completed, completed=True)

    pundo = subparsers.add_parser('undo', help='Mark a todo active again')
    pundo.add_argument('id', type=int)
    pundo.set_defaults(func=_set_completed, completed=False)

    pall = subparsers.add_parser('toggle-all', help='Complete every todo (or reopen with --undo)')
    pall.add_argument('--undo', action='store_true')
    pall.set_defaults(func=_toggle_all)

    pedit = subparsers.add_parser('edit', help='Rename a todo; an empty title deletes it')
    pedit.add_argument('id', type=int)
    pedit.add_argument('title')
    pedit.set_defaults(func=_edit)

    prm = subparsers.add_parser('rm', help='Delete a todo')
    prm.add_argument('id', type=int)
    prm.set_defaults(func=_remove)

    pclear = subparsers.add_parser('clear-completed', help='Delete every completed todo')
    pclear.set_defaults(func=_clear_completed)

    pdrop = subparsers.add_parser('drop', help='Delete every todo')
    pdrop.set_defaults(func=_drop)

    pexport = subparsers.add_parser('export', help='Print the stored todos as JSON')
    pexport.set_defaults(func=_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1

    config, err = load_config(_resolve_project_dir(args.project_dir))
    if err:
        sys.stderr.write(f"Invalid config: {err}\n")
        return 1
    args.config = config
    _configure_logging(args.log_level or get_log_level(config))

    try:
        return int(handler(args) or 0)
    except StorageError as exc:
        logger.debug("Storage failure: {}", exc)
        sys.stderr.write(f"Storage error: {exc}\n")
        return 1


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
