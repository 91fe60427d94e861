"""Join sensor readings with plant configurations by tray id."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from plantsensor._timing import Stopwatch
from plantsensor.models.combined import CombinedPlantData
from plantsensor.models.configuration import PlantConfiguration
from plantsensor.models.reading import SensorReading

_logger = logging.getLogger(__name__)


def _first_reading(readings: Sequence[SensorReading], tray_id: int) -> SensorReading | None:
    for reading in readings:
        if reading.tray_id == tray_id:
            return reading
    return None


def combine(
    readings: Sequence[SensorReading],
    configs: Sequence[PlantConfiguration],
) -> list[CombinedPlantData]:
    """Combine each configuration with the first reading for its tray.

    Output follows the order of *configs*. A configuration without a
    reading is skipped with a warning; readings without a configuration
    are ignored. When several readings share a tray id the first one wins.
    """
    watch = Stopwatch()
    _logger.info("Starting data combination")

    combined: list[CombinedPlantData] = []
    for config in configs:
        reading = _first_reading(readings, config.tray_id)
        if reading is None:
            _logger.warning("No sensor data found for tray_id %s", config.tray_id)
            continue
        combined.append(CombinedPlantData.from_pair(reading, config, timestamp=datetime.now(UTC)))

    _logger.info(
        "Data combination completed in %dms",
        watch.elapsed_ms,
    )
    return combined
