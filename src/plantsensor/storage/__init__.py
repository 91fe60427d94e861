"""Storage backends.

Three interchangeable variants (relational, in-memory, JSON file) behind
the :class:`StorageBackend` interface, plus the registry that picks one
per request.
"""

from plantsensor.storage.base import StorageBackend, StorageFailure, StorageKind, StoreResult
from plantsensor.storage.json_file import JsonFileStore
from plantsensor.storage.memory import ConcurrentMap, InMemoryStore
from plantsensor.storage.registry import NullStorage, StorageRegistry, UnrecognizedStorage
from plantsensor.storage.relational import CombinedPlantRow, RelationalStore

__all__ = [
    "CombinedPlantRow",
    "ConcurrentMap",
    "InMemoryStore",
    "JsonFileStore",
    "NullStorage",
    "RelationalStore",
    "StorageBackend",
    "StorageFailure",
    "StorageKind",
    "StorageRegistry",
    "StoreResult",
    "UnrecognizedStorage",
]
