"""Call control and in-call statistics for Polycom phones."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .api_client import TrioAPIClient
from .const import (
    CONFIG_VIDEO_CALL_RATE,
    DEFAULT_LINE,
    DIAL_POLL_ATTEMPTS,
    DIAL_POLL_INTERVAL,
    FIELD_CALL_HANDLE,
    FIELD_PACKETS_EXPECTED,
    FIELD_REMOTE_PARTY_NUMBER,
    DeviceStatus,
    DialProtocol,
)
from .exceptions import TrioNotImplementedError
from .models import (
    AudioChannelStats,
    CallPhase,
    CallStats,
    CallStatus,
    CallStatusState,
    DeviceVersion,
    EndpointStatistics,
    MuteStatus,
    VideoChannelStats,
)
from .parsers import (
    calculate_packet_loss_percentage,
    get_int,
    get_str,
    is_call_connected,
    parse_audio_channel_stats,
    parse_call_stats,
    parse_config_properties,
    parse_mute_status,
    parse_version,
    parse_video_channel_stats,
    select_media_streams,
    strip_address_scheme,
)
from .profiles import DeviceProfile, TrioProfile

_LOGGER = logging.getLogger(__name__)

# "Call does not exist" only means there is nothing to act on for these calls
_NOT_IN_CALL = (DeviceStatus.CALL_DOES_NOT_EXIST,)


class TrioCallController:
    """Drive the call lifecycle of one device.

    The device acknowledges a dial request without returning a call handle
    and offers no notification once the call is set up, so the handle is
    resolved by polling the call status after dialing.
    """

    def __init__(
        self,
        client: TrioAPIClient,
        profile: DeviceProfile | None = None,
        *,
        poll_attempts: int = DIAL_POLL_ATTEMPTS,
        poll_interval: float = DIAL_POLL_INTERVAL,
    ) -> None:
        """Initialize call controller."""
        self._client = client
        self._profile = profile or TrioProfile()
        self._poll_attempts = poll_attempts
        self._poll_interval = poll_interval
        self._phase = CallPhase.IDLE

    @property
    def profile(self) -> DeviceProfile:
        """Get the device profile."""
        return self._profile

    @property
    def phase(self) -> CallPhase:
        """Get the perceived phase of the current call."""
        return self._phase

    # Commands
    async def dial(
        self, destination: str, protocol: DialProtocol | str | None = None
    ) -> str | None:
        """Place a call and return its handle.

        Returns None when the call could not be matched within the polling
        window; the call may still be connecting.
        """
        dial_string = (destination or "").strip()
        if not dial_string:
            raise ValueError("Destination cannot be empty")

        call_type: str | None = None
        if protocol is not None:
            protocol = DialProtocol(str(protocol).upper())
            # the device only knows SIP, H323 and TEL
            call_type = (
                DialProtocol.TEL if protocol == DialProtocol.ISDN else protocol
            ).value

        await self._client.dial(dial_string, DEFAULT_LINE, call_type)
        self._phase = CallPhase.DIALING

        for attempt in range(1, self._poll_attempts + 1):
            await asyncio.sleep(self._poll_interval)
            data = await self._retrieve_raw_call_status()
            call_handle = get_str(data, FIELD_CALL_HANDLE)
            remote_address = get_str(data, FIELD_REMOTE_PARTY_NUMBER)
            if call_handle is None or remote_address is None:
                continue
            # remote party number may carry a "sip:" style prefix
            if strip_address_scheme(remote_address).lower() == dial_string.lower():
                _LOGGER.debug(
                    "Resolved call %s to %s after %d poll(s)",
                    call_handle,
                    dial_string,
                    attempt,
                )
                # the handle is known while the call is still dialing or ringing
                if is_call_connected(data):
                    self._phase = CallPhase.CONNECTED
                return call_handle

        _LOGGER.debug(
            "Could not resolve call handle for %s after %d polls",
            dial_string,
            self._poll_attempts,
        )
        return None

    async def hangup(self, call_id: str | None = None) -> None:
        """End a call; without a call id the current call is ended."""
        if not call_id:
            data = await self._retrieve_raw_call_status()
            call_id = get_str(data, FIELD_CALL_HANDLE)
            if not call_id:
                # nothing to disconnect
                self._phase = CallPhase.DISCONNECTED
                return

        await self._client.end_call(call_id, ignore=_NOT_IN_CALL)
        self._phase = CallPhase.DISCONNECTED

    async def mute(self) -> None:
        """Mute the phone."""
        await self.set_mute(True)

    async def unmute(self) -> None:
        """Unmute the phone."""
        await self.set_mute(False)

    async def set_mute(self, muted: bool) -> None:
        """Set the phone mute state."""
        await self._client.set_mute(muted, ignore=_NOT_IN_CALL)

    async def send_message(self, message: Any) -> None:
        """Show an on-screen message."""
        raise TrioNotImplementedError(
            "Polycom Trio does not support on-screen messaging"
        )

    # Queries
    async def retrieve_call_status(self, call_id: str | None = None) -> CallStatus:
        """Get call status, optionally for a specific call id."""
        data = await self._retrieve_raw_call_status()
        if not is_call_connected(data):
            self._observe(connected=False)
            return CallStatus(CallStatusState.DISCONNECTED)

        call_handle = get_str(data, FIELD_CALL_HANDLE)
        if call_id is not None and (
            call_handle is None or call_handle.lower() != call_id.lower()
        ):
            # connected, but not our call
            return CallStatus(CallStatusState.DISCONNECTED)

        self._observe(connected=True)
        return CallStatus(CallStatusState.CONNECTED, call_handle)

    async def retrieve_mute_status(self) -> MuteStatus | None:
        """Get the phone mute state; None when the device reports neither."""
        response = await self._client.get_communication_info()
        return parse_mute_status(response.data_map)

    async def retrieve_software_version(self) -> DeviceVersion | None:
        """Get the firmware version."""
        response = await self._client.get_device_info(ignore=_NOT_IN_CALL)
        return parse_version(response.data_map)

    async def can_retrieve_in_call_stats(self) -> bool:
        """Tell whether session statistics can be requested from the device."""
        version: DeviceVersion | None = None
        if self._profile.needs_firmware_version:
            version = await self.retrieve_software_version()
        allowed = self._profile.can_retrieve_in_call_stats(version)
        if not allowed:
            _LOGGER.debug("In-call statistics not supported by firmware %s", version)
        return allowed

    async def retrieve_call_stats(self) -> CallStats | None:
        """Get statistics of the connected call, or None when not in a call."""
        response = await self._client.get_call_status(ignore=_NOT_IN_CALL)
        if response.status == DeviceStatus.CALL_DOES_NOT_EXIST:
            self._observe(connected=False)
            return None
        call_stats = parse_call_stats(response.data_map)
        self._observe(connected=call_stats is not None)
        return call_stats

    async def resolve_video_call_rate(self) -> int | None:
        """Get the configured video call rate in kbps."""
        response = await self._client.get_config([CONFIG_VIDEO_CALL_RATE])
        prop = parse_config_properties(response.data_map).get(CONFIG_VIDEO_CALL_RATE)
        if prop is None or prop.value is None:
            return None
        return get_int({CONFIG_VIDEO_CALL_RATE: prop.value}, CONFIG_VIDEO_CALL_RATE)

    async def populate_in_call_stats(self, endpoint: EndpointStatistics) -> None:
        """Add media channel statistics of the active call to ``endpoint``."""
        response = await self._client.get_session_stats()
        sessions = response.data_list
        if not sessions:
            # not in call anymore
            endpoint.in_call = False
            endpoint.call_stats = None
            return

        call_stats = endpoint.call_stats
        if call_stats is None:
            return

        streams = select_media_streams(sessions, call_stats.call_id)
        if not streams.session_found:
            _LOGGER.debug("No media session found for call %s", call_stats.call_id)
            return

        audio_stats: AudioChannelStats | None = None
        audio_expected: int | None = None
        if streams.voice is not None:
            mute_status = await self.retrieve_mute_status()
            audio_stats = parse_audio_channel_stats(streams.voice, mute_status)
            audio_expected = get_int(streams.voice, FIELD_PACKETS_EXPECTED)

        video_stats: VideoChannelStats | None = None
        video_expected: int | None = None
        requested_call_rate: int | None = None
        for stream in streams.video or []:
            video = parse_video_channel_stats(
                stream, self._profile.requested_video_call_rate(stream)
            )
            if video.stats is None:
                continue
            video_stats = video.stats
            video_expected = get_int(stream, FIELD_PACKETS_EXPECTED)
            requested_call_rate = video.requested_call_rate
            if (
                requested_call_rate is None
                and self._profile.resolves_call_rate_from_config
            ):
                requested_call_rate = await self.resolve_video_call_rate()
            break

        # like most endpoints, the phone only reports bit rates for video
        if video_stats is not None:
            call_stats.call_rate_rx = video_stats.bit_rate_rx
            call_stats.call_rate_tx = video_stats.bit_rate_tx
            call_stats.requested_call_rate = requested_call_rate

        call_stats.percent_packet_loss_rx = calculate_packet_loss_percentage(
            audio_stats.packet_loss_rx if audio_stats else None,
            video_stats.packet_loss_rx if video_stats else None,
            audio_expected,
            video_expected,
        )
        endpoint.audio_channel_stats = audio_stats
        endpoint.video_channel_stats = video_stats

    async def _retrieve_raw_call_status(self) -> dict[str, Any]:
        response = await self._client.get_call_status(ignore=_NOT_IN_CALL)
        if response.status == DeviceStatus.CALL_DOES_NOT_EXIST:
            return {}
        return response.data_map

    def _observe(self, *, connected: bool) -> None:
        if connected:
            self._phase = CallPhase.CONNECTED
        elif self._phase != CallPhase.IDLE:
            self._phase = CallPhase.DISCONNECTED
