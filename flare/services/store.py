"""Key-value persistence for Flare.

The tracker only needs three operations: ``get``, ``set`` and ``clear`` on
JSON-serializable values.  Two keys are used:

    symptoms — mapping of ISO date string → symptom record
    cycle    — ``{"periods": [...]}``

``JsonFileStore`` keeps every key in one JSON document on disk and rewrites
it atomically on each ``set``.  ``MemoryStore`` is used for tests and for the
``memory`` storage backend.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from flare.config import Settings, get_settings

logger = logging.getLogger("flare.store")

SYMPTOMS_KEY = "symptoms"
CYCLE_KEY = "cycle"


class KeyValueStore(Protocol):
    """Interface for reading and writing tracker state."""

    def get(self, key: str) -> Any | None:
        """Return the stored value for ``key`` or None if absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...


class MemoryStore:
    """Process-local store.  Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """Store backed by a single JSON file.

    The file is read lazily on first access and cached.  Every ``set`` writes
    the whole document to a sibling temp file and swaps it in with
    ``os.replace`` so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as fh:
                    self._data = json.load(fh) or {}
                logger.info("Loaded %d key(s) from %s", len(self._data), self._path)
            else:
                self._data = {}
        return self._data

    def _flush(self) -> None:
        data = self._load()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._load().get(key))

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = copy.deepcopy(value)
        self._flush()

    def clear(self) -> None:
        self._data = {}
        if self._path.exists():
            self._path.unlink()
        logger.info("Cleared store at %s", self._path)


def create_store(settings: Settings | None = None) -> KeyValueStore:
    """Build the store selected by ``settings.storage_backend``."""
    s = settings or get_settings()
    if s.storage_backend == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()
    if s.storage_backend == "file":
        logger.info("Using JSON file store at %s", s.data_file)
        return JsonFileStore(s.data_file)
    raise ValueError(f"Unknown storage backend: {s.storage_backend!r}")
