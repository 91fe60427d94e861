#!/usr/bin/env python3
"""Serve example sensor readings and plant configurations for local runs.

Point the service at it with::

    PLANTSENSOR_SENSOR_READINGS_URL=http://localhost:8081/sensor-readings
    PLANTSENSOR_PLANT_CONFIGURATIONS_URL=http://localhost:8081/plant-configurations

Readings drift a little on every request when ``--jitter`` is given.
"""

from __future__ import annotations

import argparse
import logging
import random
from typing import Any

from aiohttp import web

_logger = logging.getLogger("mock_sources")

PLANT_CONFIGURATIONS: list[dict[str, Any]] = [
    {"tray_id": 1, "plant_type": "Lettuce", "target_temperature": 23.0, "target_humidity": 70.0, "target_light": 1000.0},
    {"tray_id": 2, "plant_type": "Tomato", "target_temperature": 25.0, "target_humidity": 65.0, "target_light": 1200.0},
    {"tray_id": 3, "plant_type": "Basil", "target_temperature": 24.0, "target_humidity": 60.0, "target_light": 1100.0},
    {"tray_id": 4, "plant_type": "Spinach", "target_temperature": 20.0, "target_humidity": 68.0, "target_light": 900.0},
]

SENSOR_READINGS: list[dict[str, Any]] = [
    {"tray_id": 1, "temperature": 22.5, "humidity": 65.0, "light": 1200.0},
    {"tray_id": 2, "temperature": 24.0, "humidity": 70.0, "light": 1100.0},
    {"tray_id": 3, "temperature": 23.1, "humidity": 58.5, "light": 1050.0},
]

JITTER_KEY = web.AppKey("jitter", float)

routes = web.RouteTableDef()


@web.middleware
async def request_logger(request: web.Request, handler: Any) -> web.StreamResponse:
    response = await handler(request)
    _logger.info("%s %s -> %s", request.method, request.path, response.status)
    return response


@routes.get("/sensor-readings")
async def handle_sensor_readings(request: web.Request) -> web.Response:
    jitter = request.app[JITTER_KEY]
    readings = []
    for reading in SENSOR_READINGS:
        drifted = dict(reading)
        if jitter:
            for key in ("temperature", "humidity", "light"):
                drifted[key] = round(reading[key] * (1 + random.uniform(-jitter, jitter)), 2)
        readings.append(drifted)
    return web.json_response(readings)


@routes.get("/plant-configurations")
async def handle_plant_configurations(_request: web.Request) -> web.Response:
    return web.json_response(PLANT_CONFIGURATIONS)


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve mock plant sensor data sources")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8081)
    parser.add_argument("--jitter", type=float, default=0.0, help="Relative drift applied to readings, e.g. 0.05")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = web.Application(middlewares=[request_logger])
    app[JITTER_KEY] = args.jitter
    app.add_routes(routes)
    web.run_app(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
