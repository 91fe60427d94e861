"""Custom exception hierarchy for plantsensor."""

from __future__ import annotations


class PlantSensorError(Exception):
    """Base exception for all plantsensor errors."""


class PlantSensorConfigError(PlantSensorError):
    """Invalid or missing configuration."""


class PlantSensorTransportError(PlantSensorError):
    """HTTP-level failure (network, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class PlantSensorTimeoutError(PlantSensorTransportError):
    """The remote source did not answer within the configured timeout."""


class PlantSensorDecodeError(PlantSensorTransportError):
    """The remote source answered with a body that is not JSON."""


class PlantSensorDataUnavailableError(PlantSensorError):
    """One of the remote sources produced no data for this request.

    ``source`` names the collection that could not be retrieved
    (``"sensor readings"`` or ``"plant configurations"``).
    """

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Failed to retrieve {source} from external service")
