from .backends import FileKeyValueBackend, KeyValueBackend, MemoryKeyValueBackend
from .errors import StorageCorrupt, StorageError, StorageUnavailable
from .store import TodoStore

__all__ = [
    "KeyValueBackend",
    "FileKeyValueBackend",
    "MemoryKeyValueBackend",
    "StorageError",
    "StorageUnavailable",
    "StorageCorrupt",
    "TodoStore",
]
