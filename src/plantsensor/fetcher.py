"""Remote data fetcher.

Retrieves the sensor-reading and plant-configuration collections. Every
failure (transport, timeout, malformed body, anything unexpected) is
logged with its own message and reported to the caller as ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from plantsensor._timing import Stopwatch
from plantsensor._transport import Transport
from plantsensor.config import PlantSensorConfig
from plantsensor.exceptions import (
    PlantSensorDecodeError,
    PlantSensorTimeoutError,
    PlantSensorTransportError,
)
from plantsensor.models.configuration import PlantConfiguration
from plantsensor.models.reading import SensorReading

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_READINGS = TypeAdapter(list[SensorReading])
_CONFIGURATIONS = TypeAdapter(list[PlantConfiguration])


class RemoteDataFetcher:
    """Fetch the two remote collections through a :class:`Transport`."""

    def __init__(self, config: PlantSensorConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def get_sensor_readings(self) -> list[SensorReading] | None:
        return await self._fetch(self._config.sensor_readings_url, _READINGS)

    async def get_plant_configurations(self) -> list[PlantConfiguration] | None:
        return await self._fetch(self._config.plant_configurations_url, _CONFIGURATIONS)

    async def _fetch(self, url: str, adapter: TypeAdapter[list[T]]) -> list[T] | None:
        watch = Stopwatch()
        _logger.info("Starting API call to retrieve data from %s", url)

        try:
            body: Any = await self._transport.get_json(url)
            _logger.info("Successfully received response in %dms", watch.elapsed_ms)
            items = adapter.validate_python(body)
        except PlantSensorTimeoutError:
            _logger.error(
                "Timeout error retrieving data from %s after %dms",
                url,
                watch.elapsed_ms,
                exc_info=True,
            )
            return None
        except PlantSensorDecodeError:
            _logger.error(
                "JSON parsing error for response from %s after %dms. Response may be malformed.",
                url,
                watch.elapsed_ms,
                exc_info=True,
            )
            return None
        except PlantSensorTransportError as exc:
            _logger.error(
                "HTTP error retrieving data from %s after %dms. Status: %s",
                url,
                watch.elapsed_ms,
                exc.status_code,
                exc_info=True,
            )
            return None
        except ValidationError as exc:
            _logger.error(
                "Response from %s after %dms does not match the expected shape (%d errors)",
                url,
                watch.elapsed_ms,
                exc.error_count(),
                exc_info=True,
            )
            return None
        except Exception:
            _logger.error(
                "Unexpected error retrieving data from %s after %dms",
                url,
                watch.elapsed_ms,
                exc_info=True,
            )
            return None

        _logger.debug("Decoded %d records from %s", len(items), url)
        return items
