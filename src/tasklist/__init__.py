"""Provide the public `tasklist` package exports."""

from __future__ import annotations

from .app import TodoApp
from .controller import Controller
from .model import TodoModel
from .storage import TodoStore

__all__ = ["TodoApp", "Controller", "TodoModel", "TodoStore"]
