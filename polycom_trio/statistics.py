"""Statistics snapshot assembly and control dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .api_client import TrioAPIClient
from .call_control import TrioCallController
from .const import (
    CONTROL_GRACE_PERIOD,
    CONTROL_REBOOT,
    CONTROL_RESTART,
    GROUP_DEVICE_INFO,
    GROUP_DEVICE_STATUS,
    GROUP_NETWORK_INFO,
    GROUP_RUNNING_CONFIG,
    GROUP_TRANSFER_TYPE,
    STAT_DEVICE_UPTIME,
    STAT_NETWORK_UPTIME,
)
from .mapping import PropertyProcessor
from .models import ControlButton, DeviceSnapshot, EndpointStatistics
from .parsers import normalize_uptime, parse_registration_status

_LOGGER = logging.getLogger(__name__)

CONTROL_BUTTONS = (
    ControlButton(CONTROL_RESTART, "Restart", "Restarting...", CONTROL_GRACE_PERIOD),
    ControlButton(CONTROL_REBOOT, "Reboot", "Rebooting...", CONTROL_GRACE_PERIOD),
)


class TrioStatisticsCollector:
    """Build statistics snapshots for one device.

    Every request's status is checked; the first failure aborts the whole
    snapshot and nothing partial is returned.
    """

    def __init__(
        self,
        client: TrioAPIClient,
        controller: TrioCallController,
        mapper: PropertyProcessor,
    ) -> None:
        """Initialize statistics collector."""
        self._client = client
        self._controller = controller
        self._mapper = mapper

    async def get_multiple_statistics(self) -> DeviceSnapshot:
        """Collect a full statistics snapshot."""
        statistics: dict[str, str] = {}
        await self._populate_statistics(statistics)

        controls = list(CONTROL_BUTTONS)
        for control in controls:
            statistics[control.name] = ""

        line_info = await self._client.get_line_info()
        endpoint = EndpointStatistics(
            registration_status=parse_registration_status(line_info.data_list)
        )
        await self._populate_call_statistics(endpoint)

        return DeviceSnapshot(endpoint=endpoint, statistics=statistics, controls=controls)

    async def _populate_statistics(self, statistics: dict[str, str]) -> None:
        """Apply the property mapping to the passthrough telemetry."""
        fetchers = (
            (GROUP_DEVICE_INFO, self._client.get_device_info),
            (GROUP_NETWORK_INFO, self._client.get_network_stats),
            (GROUP_RUNNING_CONFIG, self._client.get_running_config),
            (GROUP_DEVICE_STATUS, self._client.get_poll_status),
            (GROUP_TRANSFER_TYPE, self._client.get_transfer_type),
        )
        for group, fetch in fetchers:
            response = await fetch()
            self._mapper.apply(statistics, response.data_map, group)

        for key in (STAT_DEVICE_UPTIME, STAT_NETWORK_UPTIME):
            if key in statistics:
                statistics[key] = normalize_uptime(statistics[key])

    async def _populate_call_statistics(self, endpoint: EndpointStatistics) -> None:
        call_stats = await self._controller.retrieve_call_stats()
        if call_stats is None:
            endpoint.in_call = False
            return

        endpoint.in_call = True
        endpoint.call_stats = call_stats
        # older Trio firmware freezes when asked for session statistics
        if await self._controller.can_retrieve_in_call_stats():
            await self._controller.populate_in_call_stats(endpoint)

    async def control_property(self, name: str) -> None:
        """Run a control command by property name."""
        if name == CONTROL_RESTART:
            _LOGGER.info("Restarting device %s", self._client.host)
            await self._client.safe_restart()
        elif name == CONTROL_REBOOT:
            _LOGGER.info("Rebooting device %s", self._client.host)
            await self._client.safe_reboot()
        else:
            _LOGGER.warning("Ignoring unknown control property: %s", name)

    async def control_properties(self, names: Iterable[str]) -> None:
        """Run several control commands in order."""
        names = list(names)
        if not names:
            raise ValueError("Controllable properties cannot be empty")
        for name in names:
            await self.control_property(name)
