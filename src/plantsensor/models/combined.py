"""Combined plant data model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, TypeAdapter

from plantsensor.models._base import PlantBaseModel, UtcDatetime
from plantsensor.models.configuration import PlantConfiguration
from plantsensor.models.reading import SensorReading


class CombinedPlantData(PlantBaseModel):
    """A tray's configuration joined with its latest reading.

    ``tray_id`` is the identity key in every store. Serialised with
    lowerCamelCase keys (``trayId``, ``currentTemperature`` ...).
    """

    tray_id: int
    plant_type: str
    current_temperature: float
    current_humidity: float
    current_light: float
    target_temperature: float
    target_humidity: float
    target_light: float
    timestamp: UtcDatetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_pair(
        cls,
        reading: SensorReading,
        config: PlantConfiguration,
        *,
        timestamp: datetime | None = None,
    ) -> CombinedPlantData:
        """Join *config* with *reading* (which must share its tray id)."""
        return cls(
            tray_id=config.tray_id,
            plant_type=config.plant_type,
            current_temperature=reading.temperature,
            current_humidity=reading.humidity,
            current_light=reading.light,
            target_temperature=config.target_temperature,
            target_humidity=config.target_humidity,
            target_light=config.target_light,
            timestamp=timestamp if timestamp is not None else datetime.now(UTC),
        )

    def to_json_dict(self) -> dict[str, object]:
        """JSON-compatible dict with lowerCamelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


CombinedPlantDataList = TypeAdapter(list[CombinedPlantData])
"""Validator/serialiser for a JSON array of combined records."""
