"""Load optional tasklist configuration from `.tasklist/config.yaml`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .constants import (
    CONFIG_FILE,
    CORRUPT_POLICIES,
    DEFAULT_CORRUPT_POLICY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORAGE_BACKEND,
    DEFAULT_STORAGE_FORMAT,
    DEFAULT_STORE_NAME,
    STATE_DIR_NAME,
    STORAGE_BACKENDS,
    STORAGE_FORMATS,
)
from .io_utils import _load_data_with_error
from .storage.backends import is_valid_key

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def state_dir(project_dir: Path) -> Path:
    return project_dir.resolve() / STATE_DIR_NAME


def load_config(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        project_dir: Directory holding the `.tasklist/` state directory.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = state_dir(project_dir) / CONFIG_FILE
    if not path.exists():
        return {}, None
    data, err = _load_data_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _choice(raw: Any, allowed: set[str], default: str) -> str:
    if isinstance(raw, str) and raw.lower() in allowed:
        return raw.lower()
    return default


def get_store_name(config: dict[str, Any]) -> str:
    raw = config.get("store_name")
    if isinstance(raw, str) and is_valid_key(raw.strip()):
        return raw.strip()
    return DEFAULT_STORE_NAME


def get_storage_config(config: dict[str, Any]) -> dict[str, str]:
    """Extract the normalized storage block.

    Args:
        config: Configuration dictionary.

    Returns:
        A mapping with `backend`, `format` and `on_corrupt` keys. Unknown or
        invalid values fall back to their defaults.
    """
    raw = _get_nested(config, "storage")
    block = raw if isinstance(raw, dict) else {}
    return {
        "backend": _choice(block.get("backend"), STORAGE_BACKENDS, DEFAULT_STORAGE_BACKEND),
        "format": _choice(block.get("format"), STORAGE_FORMATS, DEFAULT_STORAGE_FORMAT),
        "on_corrupt": _choice(block.get("on_corrupt"), CORRUPT_POLICIES, DEFAULT_CORRUPT_POLICY),
    }


def get_log_level(config: dict[str, Any]) -> str:
    raw = config.get("log_level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return raw.upper()
    return DEFAULT_LOG_LEVEL
