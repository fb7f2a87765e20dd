"""Serialized HTTP transport to the device REST API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from .const import API_PREFIX, DEFAULT_PORT, DEFAULT_REQUEST_TIMEOUT
from .exceptions import TrioConnectionError

_LOGGER = logging.getLogger(__name__)


class TrioTransport:
    """Issue requests to the device one at a time.

    The REST API does not allow parallel processing: a request received while
    another one is being processed gets HTTP 403 or is queued for later. The
    lock is held for the whole round trip, across every caller sharing this
    transport.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        username: str,
        password: str,
        *,
        port: int = DEFAULT_PORT,
        verify_ssl: bool = False,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize transport."""
        self._session = session
        self._host = host
        self._port = port
        self._base_url = f"https://{host}:{port}/{API_PREFIX}"
        self._auth = aiohttp.BasicAuth(username, password)
        self._ssl = verify_ssl
        self._request_timeout = request_timeout
        self._lock = asyncio.Lock()

    @property
    def host(self) -> str:
        """Get device host."""
        return self._host

    @property
    def base_url(self) -> str:
        """Get base URL of the REST API."""
        return self._base_url

    async def execute(
        self, method: str, path: str, body: Any | None = None
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON envelope."""
        method = method.upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self._base_url}{path}"
        async with self._lock:
            _LOGGER.debug("%s %s", method, url)
            try:
                async with asyncio.timeout(self._request_timeout):
                    if method == "GET":
                        async with self._session.get(
                            url, auth=self._auth, ssl=self._ssl
                        ) as response:
                            return await self._handle_response(response, path)
                    async with self._session.post(
                        url,
                        json=body,
                        auth=self._auth,
                        ssl=self._ssl,
                        headers={"Content-Type": "application/json"},
                    ) as response:
                        return await self._handle_response(response, path)

            except TimeoutError as err:
                _LOGGER.error("Timeout connecting to device at %s", url)
                raise TrioConnectionError(
                    f"Timeout on {path} for device {self._host}"
                ) from err
            except aiohttp.ClientError as err:
                _LOGGER.error("Client error connecting to device: %s", err)
                raise TrioConnectionError(
                    f"Connection error on {path} for device {self._host}: {err}"
                ) from err

    async def _handle_response(
        self, response: aiohttp.ClientResponse, path: str
    ) -> dict[str, Any]:
        """Check HTTP status and decode the response body."""
        if not 200 <= response.status < 300:
            raise TrioConnectionError(
                f"HTTP {response.status} on {path} for device {self._host}"
            )

        try:
            response_data = await response.json(content_type=None)
        except (json.JSONDecodeError, ValueError) as err:
            _LOGGER.error("Invalid JSON response from %s: %s", path, err)
            raise TrioConnectionError(f"Invalid JSON response from {path}") from err

        if not isinstance(response_data, dict):
            raise TrioConnectionError(f"Unexpected response shape from {path}")

        return response_data
