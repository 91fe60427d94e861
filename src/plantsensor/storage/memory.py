"""Process-lifetime in-memory store.

Records live in a :class:`ConcurrentMap` keyed by tray id. The map is
created once per application and is only cleared by a restart.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Sequence
from typing import Generic, TypeVar

from plantsensor._timing import Stopwatch
from plantsensor.models.combined import CombinedPlantData
from plantsensor.storage.base import StorageFailure, StorageKind, StoreResult

_logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ConcurrentMap(Generic[K, V]):
    """Dict guarded by a lock, safe to share between threads and tasks.

    Every operation takes the lock exactly once, so an insert-or-replace is
    atomic per key and :meth:`values` returns a consistent snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[K, V] = {}

    def put(self, key: K, value: V) -> bool:
        """Insert or replace *key*. Returns ``True`` when a value was replaced."""
        with self._lock:
            replaced = key in self._data
            self._data[key] = value
            return replaced

    def values(self) -> list[V]:
        with self._lock:
            return list(self._data.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class InMemoryStore:
    """Upsert combined records into a shared :class:`ConcurrentMap`.

    An unexpected error stops the call and reports failure. Items applied
    before the error stay applied.
    """

    label = StorageKind.INMEMORY.value

    def __init__(self, storage: ConcurrentMap[int, CombinedPlantData] | None = None) -> None:
        self._storage: ConcurrentMap[int, CombinedPlantData] = storage if storage is not None else ConcurrentMap()

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        watch = Stopwatch()
        _logger.info("Starting in-memory storage operation for %d records", len(items))

        inserted = 0
        updated = 0
        try:
            for item in items:
                if self._storage.put(item.tray_id, item):
                    _logger.debug("Updated existing in-memory record for tray %s", item.tray_id)
                    updated += 1
                else:
                    _logger.debug("Inserted new in-memory record for tray %s", item.tray_id)
                    inserted += 1
        except Exception as exc:
            _logger.error(
                "Unexpected error saving data to in-memory storage after %dms",
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(
                self.label,
                StorageFailure.UNEXPECTED,
                str(exc),
                inserted=inserted,
                updated=updated,
                elapsed_ms=watch.elapsed_ms,
            )

        _logger.info(
            "In-memory storage completed successfully in %dms. Updated: %d, Inserted: %d",
            watch.elapsed_ms,
            updated,
            inserted,
        )
        return StoreResult.succeeded(self.label, inserted=inserted, updated=updated, elapsed_ms=watch.elapsed_ms)

    def read(self) -> list[CombinedPlantData]:
        """Snapshot of the stored records, in no particular order."""
        records = self._storage.values()
        _logger.info("Retrieving %d records from in-memory storage", len(records))
        return records

    async def read_all(self) -> list[CombinedPlantData]:
        return self.read()
