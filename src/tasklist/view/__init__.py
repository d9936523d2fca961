from .base import Intent, RenderCommand, View
from .console import ConsoleView

__all__ = [
    "Intent",
    "RenderCommand",
    "View",
    "ConsoleView",
]
