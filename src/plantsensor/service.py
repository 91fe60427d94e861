"""Request orchestration: fetch, combine, optionally persist."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from plantsensor._constants import INMEMORY_STORAGE_LABEL, NO_STORAGE_LABEL
from plantsensor._timing import Stopwatch
from plantsensor._transport import HttpTransport, Transport
from plantsensor.combiner import combine
from plantsensor.config import PlantSensorConfig
from plantsensor.exceptions import PlantSensorDataUnavailableError, PlantSensorError
from plantsensor.fetcher import RemoteDataFetcher
from plantsensor.models.responses import PlantDataResponse, StorageContentsResponse
from plantsensor.storage.base import StorageKind
from plantsensor.storage.json_file import JsonFileStore
from plantsensor.storage.memory import InMemoryStore
from plantsensor.storage.registry import StorageRegistry, UnrecognizedStorage
from plantsensor.storage.relational import RelationalStore

_logger = logging.getLogger(__name__)


def build_registry(config: PlantSensorConfig, *, memory_store: InMemoryStore | None = None) -> StorageRegistry:
    """Create the three storage backends described by *config*."""
    return StorageRegistry(
        {
            StorageKind.POSTGRESQL: RelationalStore.from_url(config.database_url),
            StorageKind.INMEMORY: memory_store if memory_store is not None else InMemoryStore(),
            StorageKind.JSON: JsonFileStore(config.json_file_path),
        }
    )


class PlantSensorService:
    """Gather both remote collections, combine them and store the result.

    Usage::

        async with PlantSensorService(config) as service:
            response = await service.collect("inmemory")
    """

    def __init__(
        self,
        config: PlantSensorConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        registry: StorageRegistry | None = None,
        memory_store: InMemoryStore | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._fetcher: RemoteDataFetcher | None = None
        self._owns_registry = registry is None
        if registry is None:
            memory_store = memory_store if memory_store is not None else InMemoryStore()
            registry = build_registry(config, memory_store=memory_store)
        elif memory_store is None:
            registered = registry.find(StorageKind.INMEMORY)
            memory_store = registered if isinstance(registered, InMemoryStore) else InMemoryStore()
        self._registry = registry
        self._memory_store = memory_store

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PlantSensorService:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.fetch_timeout)
        self._fetcher = RemoteDataFetcher(self._config, self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
        self._fetcher = None
        if not self._owns_registry:
            return
        backend = self._registry.find(StorageKind.POSTGRESQL)
        if isinstance(backend, RelationalStore):
            backend.dispose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_fetcher(self) -> RemoteDataFetcher:
        if self._fetcher is None:
            raise PlantSensorError("Service not initialized. Use 'async with PlantSensorService(...) as service:'")
        return self._fetcher

    @property
    def registry(self) -> StorageRegistry:
        return self._registry

    @property
    def memory_store(self) -> InMemoryStore:
        return self._memory_store

    async def prepare_storage(self) -> None:
        """Create the relational schema ahead of the first request.

        Best effort: a failure is logged and requests still run, the
        relational backend then reports failure on use.
        """
        backend = self._registry.find(StorageKind.POSTGRESQL)
        if not isinstance(backend, RelationalStore):
            return
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, backend.ensure_schema)
        except Exception:
            _logger.error("Could not prepare the relational schema", exc_info=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def collect(self, storage: str | None = None) -> PlantDataResponse:
        """Fetch, combine and (optionally) persist plant data.

        Parameters
        ----------
        storage : str or None
            ``"postgresql"``, ``"inmemory"`` or ``"json"`` (any case) to
            persist the combined records, ``None`` to only return them.
            Any other value is reported as unknown and nothing is stored.

        Raises
        ------
        PlantSensorDataUnavailableError
            If either remote collection could not be retrieved.
        """
        watch = Stopwatch()
        fetcher = self._require_fetcher()

        readings = await fetcher.get_sensor_readings()
        if readings is None:
            _logger.error("Failed to retrieve sensor readings")
            raise PlantSensorDataUnavailableError("sensor readings")

        configs = await fetcher.get_plant_configurations()
        if configs is None:
            _logger.error("Failed to retrieve plant configurations")
            raise PlantSensorDataUnavailableError("plant configurations")

        combined = combine(readings, configs)

        backend = self._registry.select(storage)
        result = await backend.upsert(combined)
        if storage and result.ok:
            _logger.info("Data saved to %s storage", backend.label)

        if not storage:
            storage_type = NO_STORAGE_LABEL
        elif isinstance(backend, UnrecognizedStorage):
            storage_type = backend.label
        else:
            storage_type = storage

        elapsed_ms = watch.elapsed_ms
        _logger.info("Plant sensor data request completed successfully in %dms", elapsed_ms)
        return PlantDataResponse(
            data=combined,
            saved=bool(storage) and result.ok,
            storage_type=storage_type,
            processing_time_ms=elapsed_ms,
        )

    def storage_contents(self) -> StorageContentsResponse:
        """Current contents of the in-memory backend."""
        records = self._memory_store.read()
        return StorageContentsResponse(
            storage_type=INMEMORY_STORAGE_LABEL,
            record_count=len(records),
            data=records,
        )
