"""Key-value backed store for todo records.

The whole collection lives in one blob, ``{"todos": [...]}``, under the
store's name.  Every write reads the blob, modifies the list and writes the
blob back while holding the backend's lock for that name.

Operations return their result and, when a ``callback`` is given, invoke it
with the same value before returning.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import yaml
from loguru import logger

from ..constants import DEFAULT_CORRUPT_POLICY, DEFAULT_STORAGE_FORMAT
from ..io_utils import _utc_stamp
from .backends import KeyValueBackend
from .errors import StorageCorrupt, StorageUnavailable

Record = dict[str, Any]
Callback = Optional[Callable[[list[Record]], Any]]


def _same(left: Any, right: Any) -> bool:
    # bool is an int subclass; keep True from matching 1.
    return left == right and isinstance(left, bool) == isinstance(right, bool)


def _matches(record: Record, predicate: dict[str, Any]) -> bool:
    for key, value in predicate.items():
        if key not in record or not _same(record[key], value):
            return False
    return True


def _done(callback: Callback, result: list[Record]) -> list[Record]:
    if callback is not None:
        callback(result)
    return result


class TodoStore:
    """Durable CRUD and queries over one named todo collection.

    Parameters
    ----------
    name:
        Key the collection is stored under.
    backend:
        Where the serialized collection lives.
    fmt:
        ``"json"`` or ``"yaml"`` serialization of the blob.
    on_corrupt:
        ``"fail"`` raises :class:`StorageCorrupt` when the existing blob cannot
        be parsed at initialization.  ``"reset"`` archives the unreadable blob
        under ``<name>.corrupt-<stamp>`` and starts from an empty collection.
    """

    def __init__(
        self,
        name: str,
        backend: KeyValueBackend,
        *,
        fmt: str = DEFAULT_STORAGE_FORMAT,
        on_corrupt: str = DEFAULT_CORRUPT_POLICY,
    ) -> None:
        if fmt not in {"json", "yaml"}:
            raise ValueError(f"Unsupported storage format: {fmt}")
        if on_corrupt not in {"fail", "reset"}:
            raise ValueError(f"Unsupported corrupt-data policy: {on_corrupt}")
        self.name = name
        self.fmt = fmt
        self.on_corrupt = on_corrupt
        self._backend = backend
        self._last_id = 0
        self._initialized = False
        self.initialize()

    # -- serialization ------------------------------------------------------

    def _dumps(self, todos: list[Record]) -> str:
        payload = {"todos": todos}
        if self.fmt == "yaml":
            return yaml.safe_dump(payload, sort_keys=False, default_flow_style=False, allow_unicode=True)
        return json.dumps(payload)

    def _loads(self, raw: str) -> list[Record]:
        try:
            raw.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise StorageCorrupt(self.name, f"not valid UTF-8 at offset {exc.start}") from exc
        try:
            data = yaml.safe_load(raw) if self.fmt == "yaml" else json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageCorrupt(self.name, f"JSONDecodeError: {exc}") from exc
        except yaml.YAMLError as exc:
            raise StorageCorrupt(self.name, f"YAMLError: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("todos"), list):
            raise StorageCorrupt(self.name, "expected an object with a 'todos' list")
        todos = data["todos"]
        for item in todos:
            if not isinstance(item, dict) or "id" not in item:
                raise StorageCorrupt(self.name, f"invalid todo record: {item!r}")
        return todos

    # -- backend access -----------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            with self._backend.lock(self.name):
                yield
        except OSError as exc:
            raise StorageUnavailable(self.name, f"{exc.__class__.__name__}: {exc}") from exc

    def _get_raw(self) -> Optional[str]:
        try:
            return self._backend.get(self.name)
        except UnicodeDecodeError as exc:
            raise StorageCorrupt(self.name, f"not valid UTF-8 at offset {exc.start}") from exc
        except OSError as exc:
            raise StorageUnavailable(self.name, f"{exc.__class__.__name__}: {exc}") from exc

    def _save(self, todos: list[Record]) -> None:
        try:
            self._backend.set(self.name, self._dumps(todos))
        except OSError as exc:
            raise StorageUnavailable(self.name, f"{exc.__class__.__name__}: {exc}") from exc

    def _load(self) -> list[Record]:
        raw = self._get_raw()
        if raw is None:
            return []
        return self._loads(raw)

    def _reset_corrupt(self, raw: str, error: StorageCorrupt) -> None:
        base = f"{self.name}.corrupt-{_utc_stamp()}"
        archive_key = base
        n = 1
        while self._backend.get(archive_key) is not None:
            n += 1
            archive_key = f"{base}-{n}"
        self._backend.set(archive_key, raw)
        logger.warning(
            "Store '{}' was unreadable ({}); archived it as '{}' and started empty",
            self.name,
            error.detail,
            archive_key,
        )
        self._save([])

    @contextmanager
    def _mutate(self) -> Iterator[list[Record]]:
        """Load the collection, yield it for in-place edits, then persist it."""
        self._ensure_initialized()
        with self._locked():
            todos = self._load()
            yield todos
            self._save(todos)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def _next_id(self, todos: list[Record]) -> int:
        floor = self._last_id
        for todo in todos:
            if isinstance(todo.get("id"), int) and not isinstance(todo["id"], bool):
                floor = max(floor, todo["id"])
        candidate = time.time_ns() // 1_000_000
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return candidate

    # -- public API ---------------------------------------------------------

    def initialize(self, callback: Callback = None) -> list[Record]:
        """Create the empty collection if none exists yet.

        Safe to call repeatedly; existing data is left untouched.
        """
        with self._locked():
            raw = self._get_raw()
            if raw is None:
                self._save([])
                logger.debug("Created empty store '{}'", self.name)
                todos: list[Record] = []
            else:
                try:
                    todos = self._loads(raw)
                except StorageCorrupt as exc:
                    if self.on_corrupt != "reset":
                        raise
                    self._reset_corrupt(raw, exc)
                    todos = []
        self._initialized = True
        return _done(callback, todos)

    def query(self, predicate: Optional[dict[str, Any]], callback: Callback = None) -> list[Record]:
        """Return records whose fields equal every entry of *predicate*.

        An empty or ``None`` predicate matches every record.  Collection order
        is preserved.
        """
        self._ensure_initialized()
        with self._locked():
            todos = self._load()
        if predicate:
            todos = [todo for todo in todos if _matches(todo, predicate)]
        return _done(callback, todos)

    def query_all(self, callback: Callback = None) -> list[Record]:
        self._ensure_initialized()
        with self._locked():
            todos = self._load()
        return _done(callback, todos)

    def upsert(self, data: dict[str, Any], callback: Callback = None, id: Optional[int] = None) -> list[Record]:
        """Update the record with *id*, or create a new one when *id* is None.

        Updating merges *data* into the record (the ``id`` field is never
        overwritten) and yields the whole collection.  Creating assigns a new
        id and yields a one-element list holding the new record.  An unknown
        *id* changes nothing.
        """
        if id is not None:
            with self._mutate() as todos:
                for todo in todos:
                    if _same(todo.get("id"), id):
                        for key, value in data.items():
                            if key != "id":
                                todo[key] = value
                        logger.debug("Updated todo {} in '{}': {}", id, self.name, sorted(data))
                        break
                else:
                    logger.debug("No todo {} in '{}' to update", id, self.name)
            return _done(callback, todos)

        with self._mutate() as todos:
            record = dict(data)
            record["id"] = self._next_id(todos)
            todos.append(record)
        logger.debug("Created todo {} in '{}'", record["id"], self.name)
        return _done(callback, [record])

    def remove(self, id: int, callback: Callback = None) -> list[Record]:
        with self._mutate() as todos:
            before = len(todos)
            todos[:] = [todo for todo in todos if not _same(todo.get("id"), id)]
            if len(todos) == before:
                logger.debug("No todo {} in '{}' to remove", id, self.name)
            else:
                logger.debug("Removed todo {} from '{}'", id, self.name)
        return _done(callback, todos)

    def drop_all(self, callback: Callback = None) -> list[Record]:
        with self._mutate() as todos:
            todos.clear()
        logger.debug("Dropped every todo in '{}'", self.name)
        return _done(callback, [])
