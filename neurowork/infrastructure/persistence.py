"""Persistence collaborators for the snapshot store.

Both backends store the whole snapshot as one JSON blob. A blob that cannot
be read is discarded and ``load`` reports no snapshot, so the store falls back
to the default dataset instead of failing.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import MutableMapping, Protocol

from neurowork.core.serialization import dumps, loads
from neurowork.core.validation import ValidationError
from neurowork.domain import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_KEY = "neurowork_snapshot"


class SnapshotPersistence(Protocol):
    """Load/save contract used by :class:`~neurowork.infrastructure.store.SnapshotStore`."""

    def load(self) -> Snapshot | None: ...

    def save(self, snapshot: Snapshot) -> None: ...


class InMemoryPersistence:
    """Key-value blob storage, standing in for browser local storage."""

    def __init__(self, storage: MutableMapping[str, str] | None = None, *, key: str = DEFAULT_KEY) -> None:
        self._storage: MutableMapping[str, str] = storage if storage is not None else {}
        self._key = key

    def load(self) -> Snapshot | None:
        blob = self._storage.get(self._key)
        if blob is None:
            return None
        try:
            return loads(blob)
        except ValidationError as exc:
            logger.warning("Discarding unreadable snapshot under %r: %s", self._key, exc)
            self._storage.pop(self._key, None)
            return None

    def save(self, snapshot: Snapshot) -> None:
        self._storage[self._key] = dumps(snapshot)

    def clear(self) -> None:
        self._storage.pop(self._key, None)


class JsonFilePersistence:
    """Stores the snapshot blob in a JSON file on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Snapshot | None:
        if not self._path.exists():
            return None
        try:
            return loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            logger.warning("Discarding unreadable snapshot file %s: %s", self._path, exc)
            return None

    def save(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(dumps(snapshot), encoding="utf-8")
        os.replace(tmp_path, self._path)
