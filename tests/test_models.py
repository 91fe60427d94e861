"""Tests for the pydantic record models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from plantsensor.models import (
    CombinedPlantData,
    CombinedPlantDataList,
    PlantConfiguration,
    PlantDataResponse,
    SensorReading,
)


class TestSensorReading:
    def test_parses_snake_case_payload(self) -> None:
        reading = SensorReading.model_validate({"tray_id": 1, "temperature": 22.5, "humidity": 65.0, "light": 1200.0})
        assert reading.tray_id == 1
        assert reading.temperature == 22.5

    def test_parses_camel_case_payload(self) -> None:
        reading = SensorReading.model_validate({"trayId": 3, "temperature": 20, "humidity": 50, "light": 900})
        assert reading.tray_id == 3
        assert reading.light == 900.0

    def test_numeric_strings_are_coerced(self) -> None:
        reading = SensorReading.model_validate({"tray_id": "4", "temperature": "21.5", "humidity": "60", "light": "800"})
        assert reading.tray_id == 4
        assert reading.temperature == 21.5

    def test_missing_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SensorReading.model_validate({"tray_id": 1, "temperature": 22.5})

    def test_extra_fields_ignored(self) -> None:
        reading = SensorReading.model_validate(
            {"tray_id": 1, "temperature": 1, "humidity": 2, "light": 3, "sensor_model": "X"}
        )
        assert not hasattr(reading, "sensor_model")

    def test_is_frozen(self) -> None:
        reading = SensorReading(tray_id=1, temperature=1, humidity=2, light=3)
        with pytest.raises(ValidationError):
            reading.temperature = 5  # type: ignore[misc]


class TestCombinedPlantData:
    READING = SensorReading(tray_id=1, temperature=22.5, humidity=65.0, light=1200.0)
    CONFIG = PlantConfiguration(
        tray_id=1,
        plant_type="Lettuce",
        target_temperature=23.0,
        target_humidity=70.0,
        target_light=1000.0,
    )

    def test_from_pair_copies_current_and_target_values(self) -> None:
        ts = datetime(2026, 1, 1, tzinfo=UTC)
        combined = CombinedPlantData.from_pair(self.READING, self.CONFIG, timestamp=ts)

        assert combined.tray_id == 1
        assert combined.plant_type == "Lettuce"
        assert combined.current_temperature == 22.5
        assert combined.current_humidity == 65.0
        assert combined.current_light == 1200.0
        assert combined.target_temperature == 23.0
        assert combined.target_humidity == 70.0
        assert combined.target_light == 1000.0
        assert combined.timestamp == ts

    def test_json_dict_uses_lower_camel_case(self) -> None:
        combined = CombinedPlantData.from_pair(self.READING, self.CONFIG, timestamp=datetime(2026, 1, 1, tzinfo=UTC))
        dumped = combined.to_json_dict()

        assert set(dumped) == {
            "trayId",
            "plantType",
            "currentTemperature",
            "currentHumidity",
            "currentLight",
            "targetTemperature",
            "targetHumidity",
            "targetLight",
            "timestamp",
        }
        assert dumped["trayId"] == 1
        assert isinstance(dumped["timestamp"], str)

    def test_naive_timestamp_treated_as_utc(self) -> None:
        combined = CombinedPlantData.from_pair(self.READING, self.CONFIG, timestamp=datetime(2026, 1, 1, 12, 0))
        assert combined.timestamp == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_timestamp_converted_to_utc(self) -> None:
        cet = timezone(timedelta(hours=1))
        combined = CombinedPlantData.from_pair(self.READING, self.CONFIG, timestamp=datetime(2026, 1, 1, 13, 0, tzinfo=cet))
        assert combined.timestamp == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        assert combined.timestamp.tzinfo == UTC

    def test_json_array_roundtrip_through_list_adapter(self) -> None:
        combined = CombinedPlantData.from_pair(self.READING, self.CONFIG, timestamp=datetime(2026, 1, 1, tzinfo=UTC))
        payload = CombinedPlantDataList.dump_json([combined], by_alias=True)

        restored = CombinedPlantDataList.validate_json(payload)
        assert restored == [combined]


def test_plant_data_response_dumps_camel_case_keys() -> None:
    response = PlantDataResponse(data=[], saved=False, storage_type="None", processing_time_ms=3)
    dumped = response.model_dump(mode="json", by_alias=True)
    assert dumped == {"success": True, "data": [], "saved": False, "storageType": "None", "processingTimeMs": 3}
