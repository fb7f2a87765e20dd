"""Host-facing driver for a Polycom Trio or VVX phone."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import aiohttp

from .api_client import TrioAPIClient
from .call_control import TrioCallController
from .config import TrioConfig
from .const import DialProtocol
from .exceptions import TrioError
from .mapping import PropertyMapper, PropertyProcessor
from .models import CallPhase, CallStatus, DeviceSnapshot, DeviceVersion, MuteStatus
from .profiles import get_profile
from .statistics import TrioStatisticsCollector
from .transport import TrioTransport

_LOGGER = logging.getLogger(__name__)


class PolycomTrio:
    """Monitoring and call control for one phone.

    The aiohttp session belongs to the caller; the driver never closes it.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: TrioConfig | Mapping[str, Any],
        *,
        mapper: PropertyProcessor | None = None,
    ) -> None:
        """Initialize driver."""
        if not isinstance(config, TrioConfig):
            config = TrioConfig.from_dict(config)
        self.config = config

        self._transport = TrioTransport(
            session,
            config.host,
            config.username,
            config.password,
            port=config.port,
            verify_ssl=config.verify_ssl,
            request_timeout=config.request_timeout,
        )
        self.api_client = TrioAPIClient(self._transport)
        self.call_controller = TrioCallController(
            self.api_client,
            get_profile(config.model),
            poll_attempts=config.dial_poll_attempts,
            poll_interval=config.dial_poll_interval,
        )
        self.statistics = TrioStatisticsCollector(
            self.api_client,
            self.call_controller,
            mapper if mapper is not None else PropertyMapper.default(),
        )

    @property
    def host(self) -> str:
        """Get device host."""
        return self.config.host

    @property
    def call_phase(self) -> CallPhase:
        """Get the perceived phase of the current call."""
        return self.call_controller.phase

    # Monitoring
    async def get_multiple_statistics(self) -> DeviceSnapshot:
        """Collect a full statistics snapshot."""
        return await self.statistics.get_multiple_statistics()

    async def control_property(self, name: str) -> None:
        """Run a control command (RestartDevice or RebootDevice)."""
        await self.statistics.control_property(name)

    async def control_properties(self, names: Iterable[str]) -> None:
        """Run several control commands."""
        await self.statistics.control_properties(names)

    # Call control
    async def dial(
        self, destination: str, protocol: DialProtocol | str | None = None
    ) -> str | None:
        """Place a call; returns the call id, or None if it could not be resolved."""
        return await self.call_controller.dial(destination, protocol)

    async def hangup(self, call_id: str | None = None) -> None:
        """End a call."""
        await self.call_controller.hangup(call_id)

    async def mute(self) -> None:
        """Mute the phone."""
        await self.call_controller.mute()

    async def unmute(self) -> None:
        """Unmute the phone."""
        await self.call_controller.unmute()

    async def retrieve_call_status(self, call_id: str | None = None) -> CallStatus:
        """Get call status."""
        return await self.call_controller.retrieve_call_status(call_id)

    async def retrieve_mute_status(self) -> MuteStatus | None:
        """Get mute status."""
        return await self.call_controller.retrieve_mute_status()

    async def retrieve_software_version(self) -> DeviceVersion | None:
        """Get firmware version."""
        return await self.call_controller.retrieve_software_version()

    async def send_message(self, message: Any) -> None:
        """Show an on-screen message (not supported)."""
        await self.call_controller.send_message(message)

    async def test_connection(self) -> bool:
        """Test if device is reachable."""
        try:
            await self.api_client.get_device_info()
            return True
        except TrioError as err:
            _LOGGER.debug("Connection test failed: %s", err)
            return False
