"""Typed bodies of the HTTP endpoints.

Dumped with ``by_alias=True`` so keys are lowerCamelCase, matching the
JSON file format.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from plantsensor.models._base import PlantBaseModel, UtcDatetime
from plantsensor.models.combined import CombinedPlantData


class PlantDataResponse(PlantBaseModel):
    """Body of a successful ``GET /plant-sensor-data``."""

    success: bool = True
    data: list[CombinedPlantData]
    saved: bool
    storage_type: str
    processing_time_ms: int


class StorageContentsResponse(PlantBaseModel):
    """Body of ``GET /plant-sensor-data/verify-storage``."""

    storage_type: str
    record_count: int
    data: list[CombinedPlantData]
    timestamp: UtcDatetime = Field(default_factory=lambda: datetime.now(UTC))


class ErrorResponse(PlantBaseModel):
    error: str
    processing_time_ms: int | None = None
