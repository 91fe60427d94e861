"""Service configuration for plantsensor."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from plantsensor._constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_JSON_FILE_PATH,
    DEFAULT_PORT,
)
from plantsensor.exceptions import PlantSensorConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise PlantSensorConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class PlantSensorConfig:
    """Service configuration.

    Parameters
    ----------
    sensor_readings_url : str
        URL returning a JSON array of sensor readings.
    plant_configurations_url : str
        URL returning a JSON array of plant configurations.
    fetch_timeout : float
        Upper bound in seconds for each remote call. A call exceeding it is
        treated as a failed fetch.
    database_url : str
        SQLAlchemy URL of the relational store.
    json_file_path : str
        Location of the JSON file store. The parent directory is created
        when the file backend is initialised.
    host : str
        Interface the HTTP server binds to.
    port : int
        Port the HTTP server listens on.
    log_level : str
        Root logging level used by the server entry point.
    """

    sensor_readings_url: str
    plant_configurations_url: str
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    database_url: str = DEFAULT_DATABASE_URL
    json_file_path: str = DEFAULT_JSON_FILE_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> PlantSensorConfig:
        """Create configuration from ``PLANTSENSOR_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        PlantSensorConfigError
            If a source URL is missing or a numeric variable does not parse.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PLANTSENSOR_SENSOR_READINGS_URL": "sensor_readings_url",
            "PLANTSENSOR_PLANT_CONFIGURATIONS_URL": "plant_configurations_url",
            "PLANTSENSOR_DATABASE_URL": "database_url",
            "PLANTSENSOR_JSON_FILE_PATH": "json_file_path",
            "PLANTSENSOR_HOST": "host",
            "PLANTSENSOR_LOG_LEVEL": "log_level",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric values are parsed separately
        if "fetch_timeout" not in overrides:
            timeout = _env_number(env, "PLANTSENSOR_FETCH_TIMEOUT", float)
            if timeout is not None:
                config_kwargs["fetch_timeout"] = timeout
        if "port" not in overrides:
            port = _env_number(env, "PLANTSENSOR_PORT", int)
            if port is not None:
                config_kwargs["port"] = port

        config_kwargs.update(overrides)

        for required in ("sensor_readings_url", "plant_configurations_url"):
            if not config_kwargs.get(required):
                raise PlantSensorConfigError(f"{required} is not configured")

        return cls(**config_kwargs)
