"""API client for Polycom Trio REST endpoints."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from typing import Any

from .const import (
    API_CALL_DIAL,
    API_CALL_END,
    API_CALL_MUTE,
    API_CALL_STATUS,
    API_COMMUNICATION_INFO,
    API_CONFIG_GET,
    API_DEVICE_INFO,
    API_LINE_INFO,
    API_NETWORK_STATS,
    API_POLL_STATUS,
    API_RUNNING_CONFIG,
    API_SAFE_REBOOT,
    API_SAFE_RESTART,
    API_SESSION_STATS,
    API_TRANSFER_TYPE,
    DEFAULT_LINE,
    FIELD_DATA,
    FIELD_STATUS,
    MAX_CONFIG_KEYS,
    REQ_DEST,
    REQ_LINE,
    REQ_REF,
    REQ_STATE,
    REQ_TYPE,
    DeviceStatus,
)
from .exceptions import TrioCommandError
from .transport import TrioTransport

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """Envelope of a device response after its status was checked."""

    path: str
    status: str
    data: Any = None

    @property
    def success(self) -> bool:
        """Check if the device reported success."""
        return self.status == DeviceStatus.SUCCESS

    @property
    def data_map(self) -> dict[str, Any]:
        """Get data as a mapping, empty when the device sent something else."""
        return self.data if isinstance(self.data, dict) else {}

    @property
    def data_list(self) -> list[dict[str, Any]]:
        """Get data as a list of mappings, empty when absent."""
        if not isinstance(self.data, list):
            return []
        return [item for item in self.data if isinstance(item, dict)]


class TrioAPIClient:
    """Client for the device REST API.

    Every method routes through the transport and checks the device status
    immediately. ``ignore`` lists statuses that are not errors in the context
    of the call; such responses are returned so the caller can tell them
    apart from success.
    """

    def __init__(self, transport: TrioTransport) -> None:
        """Initialize API client."""
        self._transport = transport

    @property
    def host(self) -> str:
        """Get device host."""
        return self._transport.host

    async def _request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        ignore: Collection[str] = (),
    ) -> ApiResponse:
        """Make a request and check the device status."""
        payload = await self._transport.execute(method, path, body)
        # the device sends the status both as "2000" and 2000
        status = str(payload.get(FIELD_STATUS, "")).strip()
        response = ApiResponse(path=path, status=status, data=payload.get(FIELD_DATA))
        self.check_status(response, ignore)
        return response

    def check_status(self, response: ApiResponse, ignore: Collection[str] = ()) -> None:
        """Raise unless the status is success or ignorable for this request."""
        if response.success or response.status in ignore:
            return
        _LOGGER.debug(
            "Status %s on %s for device %s is neither success nor ignorable",
            response.status,
            response.path,
            self.host,
        )
        raise TrioCommandError(self.host, response.path, response.status)

    # Telemetry endpoints
    async def get_device_info(self, ignore: Collection[str] = ()) -> ApiResponse:
        """Get device info (model, firmware release, uptime, addresses)."""
        return await self._request("GET", API_DEVICE_INFO, ignore=ignore)

    async def get_network_stats(self) -> ApiResponse:
        """Get network statistics."""
        return await self._request("GET", API_NETWORK_STATS)

    async def get_running_config(self) -> ApiResponse:
        """Get running configuration state."""
        return await self._request("GET", API_RUNNING_CONFIG)

    async def get_poll_status(self) -> ApiResponse:
        """Get device status."""
        return await self._request("GET", API_POLL_STATUS)

    async def get_transfer_type(self) -> ApiResponse:
        """Get the configured call transfer type."""
        return await self._request("GET", API_TRANSFER_TYPE)

    async def get_line_info(self) -> ApiResponse:
        """Get line registration details."""
        return await self._request("GET", API_LINE_INFO)

    async def get_call_status(self, ignore: Collection[str] = ()) -> ApiResponse:
        """Get status of the current call."""
        return await self._request("GET", API_CALL_STATUS, ignore=ignore)

    async def get_communication_info(self) -> ApiResponse:
        """Get communication info including the phone mute state."""
        return await self._request("GET", API_COMMUNICATION_INFO)

    async def get_session_stats(self) -> ApiResponse:
        """Get per-stream media statistics of active sessions."""
        return await self._request("GET", API_SESSION_STATS)

    async def get_config(self, keys: Iterable[str]) -> ApiResponse:
        """Get values of config properties."""
        keys = list(keys)
        if not keys:
            raise ValueError("At least one config key is required")
        if len(keys) > MAX_CONFIG_KEYS:
            raise ValueError(
                f"At most {MAX_CONFIG_KEYS} config keys can be requested at once"
            )
        return await self._request("POST", API_CONFIG_GET, {FIELD_DATA: keys})

    # Call control endpoints
    async def dial(
        self, dest: str, line: str = DEFAULT_LINE, call_type: str | None = None
    ) -> ApiResponse:
        """Place a call; the response carries no call handle."""
        data = {REQ_DEST: dest, REQ_LINE: line}
        if call_type:
            data[REQ_TYPE] = call_type
        _LOGGER.debug("dial API call: dest='%s' | line=%s | type=%s", dest, line, call_type)
        return await self._request("POST", API_CALL_DIAL, {FIELD_DATA: data})

    async def end_call(self, ref: str, ignore: Collection[str] = ()) -> ApiResponse:
        """End a call by its handle."""
        return await self._request(
            "POST", API_CALL_END, {FIELD_DATA: {REQ_REF: ref}}, ignore=ignore
        )

    async def set_mute(self, muted: bool, ignore: Collection[str] = ()) -> ApiResponse:
        """Mute or unmute the phone."""
        return await self._request(
            "POST",
            API_CALL_MUTE,
            {FIELD_DATA: {REQ_STATE: "1" if muted else "0"}},
            ignore=ignore,
        )

    # System endpoints
    async def safe_restart(self) -> ApiResponse:
        """Restart the phone application."""
        return await self._request("POST", API_SAFE_RESTART)

    async def safe_reboot(self) -> ApiResponse:
        """Reboot the device."""
        return await self._request("POST", API_SAFE_REBOOT)
