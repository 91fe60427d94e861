#!/usr/bin/env python3
"""Run one fetch/combine/store cycle without the HTTP server.

Reads the same ``PLANTSENSOR_*`` environment variables as the server and
prints the response body as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from plantsensor import PlantSensorConfig, PlantSensorDataUnavailableError, PlantSensorService  # noqa: E402


async def _run(storage: str | None) -> int:
    config = PlantSensorConfig.from_env()
    async with PlantSensorService(config) as service:
        try:
            response = await service.collect(storage)
        except PlantSensorDataUnavailableError as exc:
            print(json.dumps({"error": str(exc)}), file=sys.stderr)
            return 1
    print(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch, combine and optionally store plant sensor data once")
    parser.add_argument("--storage", help="postgresql, inmemory or json (default: do not store)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(asyncio.run(_run(args.storage)))


if __name__ == "__main__":
    main()
