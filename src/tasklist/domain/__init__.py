from .models import Filter, TodoCounts, TodoItem

__all__ = [
    "Filter",
    "TodoItem",
    "TodoCounts",
]
