"""Snapshot store: the single source of truth for a session."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from neurowork.core.seed import default_snapshot
from neurowork.core.validation import InvalidOperation
from neurowork.domain import Snapshot

from .persistence import InMemoryPersistence, SnapshotPersistence

logger = logging.getLogger(__name__)

Producer = Callable[[Snapshot], Snapshot]


class SnapshotStore:
    """Holds the current snapshot and commits producer results atomically.

    Writers are serialised by a lock. A producer that raises leaves the store
    untouched, and readers only ever see a fully committed snapshot.
    """

    def __init__(
        self,
        persistence: SnapshotPersistence | None = None,
        *,
        default_factory: Callable[[], Snapshot] = default_snapshot,
    ) -> None:
        self._persistence = persistence if persistence is not None else InMemoryPersistence()
        self._default_factory = default_factory
        self._lock = threading.Lock()
        self._version = 0
        self._snapshot = self._load()

    def _load(self) -> Snapshot:
        snapshot = self._persistence.load()
        if snapshot is None:
            logger.info("No stored snapshot found; starting from the default dataset")
            snapshot = self._default_factory()
        return snapshot

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    def apply_mutation(self, producer: Producer, *, expected_version: int | None = None) -> Snapshot:
        """Run ``producer`` against the current snapshot and commit its result.

        ``expected_version`` turns the commit into a compare-and-swap: it fails
        with :class:`InvalidOperation` when another commit got there first.
        """

        with self._lock:
            if expected_version is not None and expected_version != self._version:
                raise InvalidOperation(
                    f"snapshot version {expected_version} is stale (current {self._version})"
                )
            current = self._snapshot
            updated = producer(current)
            if not isinstance(updated, Snapshot):
                raise TypeError("producer must return a Snapshot")
            if updated is current:
                return current

            self._persistence.save(updated)
            self._snapshot = updated
            self._version += 1
            logger.debug("Committed snapshot version %s", self._version)
            return updated

    def reset(self) -> Snapshot:
        """Drop the session state and start again from the default dataset."""

        with self._lock:
            snapshot = self._default_factory()
            self._persistence.save(snapshot)
            self._snapshot = snapshot
            self._version += 1
            return snapshot
