"""HTTP endpoint tests using aiohttp's test client."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from aiohttp.test_utils import TestClient, TestServer

from plantsensor.config import PlantSensorConfig
from plantsensor.exceptions import PlantSensorTransportError
from plantsensor.server import create_app
from plantsensor.service import PlantSensorService
from plantsensor.storage import InMemoryStore, JsonFileStore, StorageKind, StorageRegistry

READINGS_URL = "http://sources.test/sensor-readings"
CONFIGURATIONS_URL = "http://sources.test/plant-configurations"


class _Sources:
    def __init__(self, *, fail_readings: bool = False) -> None:
        self.fail_readings = fail_readings

    async def get_json(self, url: str) -> Any:
        if url == READINGS_URL:
            if self.fail_readings:
                raise PlantSensorTransportError("HTTP 502", status_code=502, url=url)
            return [
                {"tray_id": 1, "temperature": 22.5, "humidity": 65.0, "light": 1200.0},
                {"tray_id": 3, "temperature": 19.0, "humidity": 58.0, "light": 900.0},
            ]
        return [
            {"tray_id": 1, "plant_type": "Lettuce", "target_temperature": 23.0, "target_humidity": 70.0, "target_light": 1000.0},
            {"tray_id": 2, "plant_type": "Tomato", "target_temperature": 25.0, "target_humidity": 65.0, "target_light": 1200.0},
        ]


@asynccontextmanager
async def _client(tmp_path: Path, *, fail_readings: bool = False) -> AsyncIterator[tuple[TestClient, PlantSensorService]]:
    config = PlantSensorConfig(
        sensor_readings_url=READINGS_URL,
        plant_configurations_url=CONFIGURATIONS_URL,
        json_file_path=str(tmp_path / "plant-sensor-data.json"),
    )
    registry = StorageRegistry(
        {
            StorageKind.INMEMORY: InMemoryStore(),
            StorageKind.JSON: JsonFileStore(config.json_file_path),
        }
    )
    service = PlantSensorService(config, transport=_Sources(fail_readings=fail_readings), registry=registry)
    async with TestClient(TestServer(create_app(config, service=service))) as client:
        yield client, service


@pytest.mark.asyncio
async def test_get_without_storage(tmp_path: Path) -> None:
    async with _client(tmp_path) as (client, _service):
        resp = await client.get("/plant-sensor-data")
        body = await resp.json()

    assert resp.status == 200
    assert body["success"] is True
    assert body["saved"] is False
    assert body["storageType"] == "None"
    assert isinstance(body["processingTimeMs"], int)
    assert [item["trayId"] for item in body["data"]] == [1]
    item = body["data"][0]
    assert item["plantType"] == "Lettuce"
    assert item["currentTemperature"] == 22.5
    assert item["targetTemperature"] == 23.0


@pytest.mark.asyncio
async def test_inmemory_then_verify_storage(tmp_path: Path) -> None:
    async with _client(tmp_path) as (client, _service):
        saved = await (await client.get("/plant-sensor-data", params={"storage": "inmemory"})).json()
        resp = await client.get("/plant-sensor-data/verify-storage")
        body = await resp.json()

    assert saved["saved"] is True
    assert saved["storageType"] == "inmemory"
    assert resp.status == 200
    assert body["storageType"] == "InMemory"
    assert body["recordCount"] == 1
    assert body["data"][0]["trayId"] == 1
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_json_storage_writes_file(tmp_path: Path) -> None:
    async with _client(tmp_path) as (client, _service):
        body = await (await client.get("/plant-sensor-data", params={"storage": "json"})).json()

    assert body["saved"] is True
    assert (tmp_path / "plant-sensor-data.json").exists()


@pytest.mark.asyncio
async def test_unknown_storage_is_tagged(tmp_path: Path) -> None:
    async with _client(tmp_path) as (client, _service):
        resp = await client.get("/plant-sensor-data", params={"storage": "redis"})
        body = await resp.json()

    assert resp.status == 200
    assert body["success"] is True
    assert body["saved"] is False
    assert body["storageType"] == "Unknown(redis)"


@pytest.mark.asyncio
async def test_unregistered_backend_is_treated_as_unknown(tmp_path: Path) -> None:
    async with _client(tmp_path) as (client, _service):
        body = await (await client.get("/plant-sensor-data", params={"storage": "postgresql"})).json()

    assert body["saved"] is False
    assert body["storageType"] == "Unknown(postgresql)"


@pytest.mark.asyncio
async def test_fetch_failure_returns_500(tmp_path: Path) -> None:
    async with _client(tmp_path, fail_readings=True) as (client, _service):
        resp = await client.get("/plant-sensor-data", params={"storage": "inmemory"})
        body = await resp.json()
        contents = await (await client.get("/plant-sensor-data/verify-storage")).json()

    assert resp.status == 500
    assert body == {"error": "Failed to retrieve sensor readings from external service"}
    assert contents["recordCount"] == 0


@pytest.mark.asyncio
async def test_unexpected_error_returns_500_with_timing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    async def exploding_collect(_self: Any, _storage: str | None = None) -> Any:
        raise RuntimeError("boom")

    monkeypatch.setattr(PlantSensorService, "collect", exploding_collect)

    async with _client(tmp_path) as (client, _service):
        resp = await client.get("/plant-sensor-data")
        body = await resp.json()

    assert resp.status == 500
    assert body["error"] == "An unexpected error occurred while processing the request"
    assert isinstance(body["processingTimeMs"], int)
