"""Data models for plantsensor records and responses."""

from plantsensor.models._base import PlantBaseModel, UtcDatetime, ensure_utc
from plantsensor.models.combined import CombinedPlantData, CombinedPlantDataList
from plantsensor.models.configuration import PlantConfiguration
from plantsensor.models.reading import SensorReading
from plantsensor.models.responses import ErrorResponse, PlantDataResponse, StorageContentsResponse

__all__ = [
    "CombinedPlantData",
    "CombinedPlantDataList",
    "ErrorResponse",
    "PlantBaseModel",
    "PlantConfiguration",
    "PlantDataResponse",
    "SensorReading",
    "StorageContentsResponse",
    "UtcDatetime",
    "ensure_utc",
]
