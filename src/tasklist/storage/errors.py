from __future__ import annotations


class StorageError(RuntimeError):
    """Base class for failures of the persistence medium."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"{name}: {detail}")
        self.name = name
        self.detail = detail


class StorageUnavailable(StorageError):
    """The backend could not be read or written."""


class StorageCorrupt(StorageError):
    """The persisted collection could not be parsed."""
