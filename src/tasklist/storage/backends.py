"""Key-value backends holding serialized collections.

A backend maps a store name to an opaque text blob.  It knows nothing about
the shape of the blob; parsing and validation live in :mod:`.store`.
"""

from __future__ import annotations

import re
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..io_utils import FileLock, _atomic_write_text

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_valid_key(key: str) -> bool:
    return bool(_KEY_RE.match(key or "")) and ".." not in key


def _check_key(key: str) -> str:
    if not is_valid_key(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class KeyValueBackend(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def lock(self, key: str) -> Iterator[None]:
        """Context manager held around a read-modify-write of *key*."""
        raise NotImplementedError


class MemoryKeyValueBackend(KeyValueBackend):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._thread_lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(_check_key(key))

    def set(self, key: str, value: str) -> None:
        self._data[_check_key(key)] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(_check_key(key), None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        _check_key(key)
        with self._thread_lock:
            yield


class FileKeyValueBackend(KeyValueBackend):
    """One file per key under *root*, written atomically.

    Parameters
    ----------
    root:
        Directory holding the blobs, e.g. ``.tasklist/store/``.
    suffix:
        File suffix appended to every key (``.json`` or ``.yaml``).

    Bytes that are not valid UTF-8 come back as surrogate escapes and are
    written back unchanged, so an unreadable blob can still be archived.
    """

    def __init__(self, root: Path, suffix: str = ".json") -> None:
        self.root = root
        self.suffix = suffix
        self._thread_lock = threading.RLock()

    def _path(self, key: str) -> Path:
        return self.root / f"{_check_key(key)}{self.suffix}"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8", errors="surrogateescape")

    def set(self, key: str, value: str) -> None:
        _atomic_write_text(self._path(key), value, errors="surrogateescape")

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.name[: -len(self.suffix)] for p in self.root.glob(f"*{self.suffix}") if p.is_file())

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self._thread_lock:
            with FileLock(self.root / f"{_check_key(key)}.lock"):
                yield
