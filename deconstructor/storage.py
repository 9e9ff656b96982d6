"""Durable per-client counter storage.

Values are read once when the store is opened and written back on every
mutation. All mutation happens on one thread, so last write wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Keys shared with the usage gate.
WORD_COUNT_KEY = "deconstructedWordsCount"
OPTED_IN_KEY = "emailSubmitted"
DISMISS_COUNT_KEY = "emailDialogDismissCount"


class CounterStore(Protocol):
    """String-keyed key-value store."""

    def get(self, key: str, default: Any) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-process store (tests, ephemeral sessions)."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    Unreadable or corrupt files behave like an empty store; write failures
    are logged and the in-memory value is kept.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._values: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error reading counter store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Counter store %s does not hold an object; ignoring it", self.path)
            return {}
        return data

    def get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except OSError as e:
            logger.error("Error writing counter store %s: %s", self.path, e)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)


def get_counter_store_path(state_dir: Path) -> Path:
    return state_dir / "counters.json"


def read_counter(store: CounterStore, key: str, default: int = 0) -> int:
    """Read an integer counter, falling back to `default` for missing or corrupt values."""
    value = store.get(key, default)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring corrupt counter %s=%r; using %d", key, value, default)
        return default
