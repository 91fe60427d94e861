"""aiohttp web application exposing the plant sensor data endpoints."""

from __future__ import annotations

import argparse
import dataclasses
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

from aiohttp import web

from plantsensor._constants import ROUTE_PLANT_SENSOR_DATA, ROUTE_VERIFY_STORAGE
from plantsensor._redact import redact_for_log
from plantsensor._timing import Stopwatch
from plantsensor.config import PlantSensorConfig
from plantsensor.exceptions import PlantSensorConfigError, PlantSensorDataUnavailableError
from plantsensor.models._base import PlantBaseModel
from plantsensor.models.responses import ErrorResponse
from plantsensor.service import PlantSensorService

_logger = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("plantsensor_service", PlantSensorService)

routes = web.RouteTableDef()


@web.middleware
async def request_logger(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    _logger.debug("Got request: %s", request)
    response = await handler(request)
    _logger.debug("Sent response: %s", response)
    return response


def _json(model: PlantBaseModel, *, status: int = 200) -> web.Response:
    return web.json_response(model.model_dump(mode="json", by_alias=True, exclude_none=True), status=status)


@routes.get(ROUTE_PLANT_SENSOR_DATA)
async def handle_plant_sensor_data(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    storage = request.query.get("storage")
    watch = Stopwatch()

    try:
        response = await service.collect(storage)
    except PlantSensorDataUnavailableError as exc:
        return _json(ErrorResponse(error=str(exc)), status=500)
    except Exception:
        elapsed_ms = watch.elapsed_ms
        _logger.error(
            "Unexpected error processing plant sensor data request after %dms",
            elapsed_ms,
            exc_info=True,
        )
        return _json(
            ErrorResponse(
                error="An unexpected error occurred while processing the request",
                processing_time_ms=elapsed_ms,
            ),
            status=500,
        )
    return _json(response)


@routes.get(ROUTE_VERIFY_STORAGE)
async def handle_verify_storage(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    try:
        contents = service.storage_contents()
    except Exception:
        _logger.error("Error verifying storage", exc_info=True)
        return _json(ErrorResponse(error="An error occurred while verifying storage"), status=500)
    return _json(contents)


def create_app(config: PlantSensorConfig, *, service: PlantSensorService | None = None) -> web.Application:
    """Build the web application.

    The service (and with it the outbound HTTP session and the storage
    backends) lives for the lifetime of the application.
    """
    app = web.Application(middlewares=[request_logger])
    app.add_routes(routes)

    async def _service_ctx(app: web.Application) -> AsyncIterator[None]:
        svc = service if service is not None else PlantSensorService(config)
        async with svc:
            await svc.prepare_storage()
            app[SERVICE_KEY] = svc
            yield

    app.cleanup_ctx.append(_service_ctx)
    return app


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Serve combined plant sensor data over HTTP.")
    parser.add_argument("--host", help="Interface to bind (default: PLANTSENSOR_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: PLANTSENSOR_PORT or 8080)")
    parser.add_argument("--log-level", help="Logging level (default: PLANTSENSOR_LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)

    overrides = {
        name: value
        for name, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    try:
        config = PlantSensorConfig.from_env(**overrides)
    except PlantSensorConfigError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logger.info("Starting with configuration %s", redact_for_log(dataclasses.asdict(config)))

    web.run_app(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
