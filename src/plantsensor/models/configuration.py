"""Plant configuration model."""

from __future__ import annotations

from plantsensor.models._base import PlantBaseModel


class PlantConfiguration(PlantBaseModel):
    """Crop grown on a tray and the climate it should be kept at."""

    tray_id: int
    plant_type: str
    target_temperature: float
    target_humidity: float
    target_light: float
