"""HTTP transport for the remote JSON sources."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from plantsensor._constants import USER_AGENT
from plantsensor.exceptions import (
    PlantSensorDecodeError,
    PlantSensorTimeoutError,
    PlantSensorTransportError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the fetcher.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str) -> Any:
        ...


class HttpTransport:
    """GET a URL and decode its JSON body, bounded by a per-call timeout."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> Any:
        """Return the decoded JSON body of ``GET url``.

        Raises
        ------
        PlantSensorTimeoutError
            The call did not complete within the configured timeout.
        PlantSensorTransportError
            Connection failure or a non-2xx status.
        PlantSensorDecodeError
            The body is not valid JSON.
        """
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise PlantSensorTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except PlantSensorTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise PlantSensorTimeoutError(
                f"Request to {url} timed out after {self._timeout.total}s",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise PlantSensorTransportError(
                f"Request to {url} failed: {exc}",
                url=url,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PlantSensorDecodeError(
                f"Invalid JSON from {url}: {text[:200]}",
                status_code=200,
                url=url,
            ) from exc
