"""Selection of a storage backend from a request's selector string."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from plantsensor._constants import NO_STORAGE_LABEL
from plantsensor.models.combined import CombinedPlantData
from plantsensor.storage.base import StorageBackend, StorageKind, StoreResult

_logger = logging.getLogger(__name__)


class NullStorage:
    """Selected when the request names no storage. Persists nothing."""

    label = NO_STORAGE_LABEL

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        _logger.info("No storage parameter provided, data not saved to any storage")
        return StoreResult(backend=self.label, ok=False, message="no storage selected")


class UnrecognizedStorage:
    """Selected for a selector outside :class:`StorageKind`. Persists nothing."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self.label = f"Unknown({selector})"

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        _logger.warning("Unknown storage type '%s', data not saved", self.selector)
        return StoreResult(backend=self.label, ok=False, message=f"unrecognized storage selector {self.selector!r}")


class StorageRegistry:
    """The closed set of storage backends available to requests."""

    def __init__(self, backends: Mapping[StorageKind, StorageBackend]) -> None:
        self._backends = dict(backends)

    def get(self, kind: StorageKind) -> StorageBackend:
        return self._backends[kind]

    def find(self, kind: StorageKind) -> StorageBackend | None:
        return self._backends.get(kind)

    def select(self, selector: str | None) -> StorageBackend:
        """Resolve *selector* to a backend.

        ``None`` or an empty string yields :class:`NullStorage`; an unknown
        value, or a kind with no backend registered, yields
        :class:`UnrecognizedStorage`.
        """
        if not selector:
            return NullStorage()
        kind = StorageKind.parse(selector)
        if kind is None or kind not in self._backends:
            return UnrecognizedStorage(selector)
        return self._backends[kind]
