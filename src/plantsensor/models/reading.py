"""Sensor reading model."""

from __future__ import annotations

from plantsensor.models._base import PlantBaseModel


class SensorReading(PlantBaseModel):
    """Current climate measured at one tray.

    Parameters
    ----------
    tray_id : int
        Tray the sensor is mounted on.
    temperature : float
        Air temperature in °C.
    humidity : float
        Relative humidity in percent.
    light : float
        Light intensity in lux.
    """

    tray_id: int
    temperature: float
    humidity: float
    light: float
