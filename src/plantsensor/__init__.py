"""plantsensor - Combine remote plant sensor readings and store them."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("plantsensor")
except PackageNotFoundError:
    __version__ = "0+local"
from plantsensor.combiner import combine
from plantsensor.config import PlantSensorConfig
from plantsensor.exceptions import (
    PlantSensorConfigError,
    PlantSensorDataUnavailableError,
    PlantSensorDecodeError,
    PlantSensorError,
    PlantSensorTimeoutError,
    PlantSensorTransportError,
)
from plantsensor.fetcher import RemoteDataFetcher
from plantsensor.models import (
    CombinedPlantData,
    PlantConfiguration,
    PlantDataResponse,
    SensorReading,
    StorageContentsResponse,
)
from plantsensor.service import PlantSensorService
from plantsensor.storage import (
    InMemoryStore,
    JsonFileStore,
    RelationalStore,
    StorageFailure,
    StorageKind,
    StorageRegistry,
    StoreResult,
)

__all__ = [
    "__version__",
    "CombinedPlantData",
    "InMemoryStore",
    "JsonFileStore",
    "PlantConfiguration",
    "PlantDataResponse",
    "PlantSensorConfig",
    "PlantSensorConfigError",
    "PlantSensorDataUnavailableError",
    "PlantSensorDecodeError",
    "PlantSensorError",
    "PlantSensorService",
    "PlantSensorTimeoutError",
    "PlantSensorTransportError",
    "RelationalStore",
    "RemoteDataFetcher",
    "SensorReading",
    "StorageContentsResponse",
    "StorageFailure",
    "StorageKind",
    "StorageRegistry",
    "StoreResult",
    "combine",
]
