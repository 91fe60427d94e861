"""Storage capability shared by every backend.

Backends never raise across :meth:`StorageBackend.upsert`; a failure is
reported through :class:`StoreResult` with a :class:`StorageFailure`
category.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from plantsensor.models.combined import CombinedPlantData


class StorageKind(StrEnum):
    """Recognised storage selectors."""

    POSTGRESQL = "postgresql"
    INMEMORY = "inmemory"
    JSON = "json"

    @classmethod
    def parse(cls, selector: str) -> StorageKind | None:
        """Case-insensitive lookup; ``None`` for anything unrecognised."""
        try:
            return cls(selector.lower())
        except ValueError:
            return None


class StorageFailure(StrEnum):
    CONNECTION = "connection"
    COMMIT = "commit"
    IO = "io"
    SERIALIZATION = "serialization"
    UNEXPECTED = "unexpected"


class StoreResult(BaseModel):
    """Outcome of one upsert call."""

    model_config = ConfigDict(frozen=True)

    backend: str
    ok: bool
    failure: StorageFailure | None = None
    inserted: int = 0
    updated: int = 0
    elapsed_ms: int = 0
    message: str = ""

    @classmethod
    def succeeded(cls, backend: str, *, inserted: int, updated: int, elapsed_ms: int) -> StoreResult:
        return cls(backend=backend, ok=True, inserted=inserted, updated=updated, elapsed_ms=elapsed_ms)

    @classmethod
    def failed(
        cls,
        backend: str,
        failure: StorageFailure,
        message: str,
        *,
        inserted: int = 0,
        updated: int = 0,
        elapsed_ms: int = 0,
    ) -> StoreResult:
        return cls(
            backend=backend,
            ok=False,
            failure=failure,
            inserted=inserted,
            updated=updated,
            elapsed_ms=elapsed_ms,
            message=message,
        )


class StorageBackend(Protocol):
    """Structural interface of a storage variant."""

    label: str

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        ...

