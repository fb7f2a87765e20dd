"""Normalizers turning raw device payloads into typed statistics.

Everything in this module is a pure function over already-fetched data. The
device reports almost every value as a string, sometimes blank and sometimes
missing altogether, so each field goes through an extractor that yields
``None`` instead of failing the whole snapshot.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .const import (
    FIELD_CALL_HANDLE,
    FIELD_CALL_STATE,
    FIELD_CATEGORY,
    FIELD_CONFIG_SOURCE,
    FIELD_CONFIG_VALUE,
    FIELD_FIRMWARE_RELEASE,
    FIELD_JITTER,
    FIELD_PACKETS_EXPECTED,
    FIELD_PACKETS_LOST,
    FIELD_PACKETS_RECEIVED,
    FIELD_PACKETS_SENT,
    FIELD_PHONE_MUTE_STATE,
    FIELD_PROTOCOL,
    FIELD_PROXY_ADDRESS,
    FIELD_REF,
    FIELD_REGISTRATION_STATUS,
    FIELD_REMOTE_PARTY_NUMBER,
    FIELD_SIP_ADDRESS,
    FIELD_STREAMS,
    FIELD_TX_CODEC,
    FIELD_VIDEO_RX_BITRATE,
    FIELD_VIDEO_RX_FRAME_HEIGHT,
    FIELD_VIDEO_RX_FRAME_WIDTH,
    FIELD_VIDEO_RX_FRAMERATE,
    FIELD_VIDEO_TX_BITRATE,
    FIELD_VIDEO_TX_FRAME_HEIGHT,
    FIELD_VIDEO_TX_FRAME_WIDTH,
    FIELD_VIDEO_TX_FRAMERATE,
    INFERABLE_PROTOCOLS,
    VALUE_AUTO,
    VALUE_CONNECTED,
    VALUE_FALSE,
    VALUE_REGISTERED,
    VALUE_TRUE,
    VALUE_UNREGISTERED,
    VALUE_VIDEO,
    VALUE_VOICE,
)
from .models import (
    AudioChannelStats,
    CallStats,
    ConfigProperty,
    DeviceVersion,
    MuteStatus,
    RegistrationStatus,
    VideoChannelStats,
)

_LOGGER = logging.getLogger(__name__)

_UPTIME_PATTERN = re.compile(r"(\d+)\sday\s(\d+):(\d+):(\d+)", re.IGNORECASE)


# Field extractors


def get_str(data: Mapping[str, Any] | None, key: str) -> str | None:
    """Return the field as a string, or None when missing or blank."""
    if not data:
        return None
    value = data.get(key)
    if value is None or isinstance(value, (Mapping, list)):
        return None
    text = str(value)
    return text if text.strip() else None


def get_int(data: Mapping[str, Any] | None, key: str) -> int | None:
    """Return the field as an integer, or None when missing or not numeric."""
    text = get_str(data, key)
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        _LOGGER.debug("Ignoring non-integer value for %s: %r", key, text)
        return None
    return int(number) if number.is_integer() else None


def get_float(data: Mapping[str, Any] | None, key: str) -> float | None:
    """Return the field as a float, or None when missing or not numeric."""
    text = get_str(data, key)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        _LOGGER.debug("Ignoring non-numeric value for %s: %r", key, text)
        return None


def get_list(data: Mapping[str, Any] | None, key: str) -> list[Mapping[str, Any]]:
    """Return the mapping entries of a list field; anything else is empty."""
    if not data:
        return []
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


# Scalar normalizers


def parse_version(data: Mapping[str, Any] | None) -> DeviceVersion | None:
    """Extract the firmware version from a device info payload."""
    release = get_str(data, FIELD_FIRMWARE_RELEASE)
    if release is None:
        return None
    return DeviceVersion.parse(release)


def normalize_uptime(raw_uptime: str | None) -> str | None:
    """Rewrite "0 day 0:34:33" as "0 day(s) 0 hour(s) 34 minute(s) 33 second(s)".

    Strings in any other format are returned unchanged.
    """
    if raw_uptime is None:
        return None
    match = _UPTIME_PATTERN.search(raw_uptime)
    if match is None:
        _LOGGER.debug("No valid uptime format found in %r", raw_uptime)
        return raw_uptime
    days, hours, minutes, seconds = match.groups()
    return (
        f"{days} day(s) {hours} hour(s) {minutes} minute(s) {seconds} second(s)"
    )


def clean_protocol(codec: str) -> str:
    """Strip the index prefix from a codec string, e.g. "3:G.722.1"."""
    index = codec.find(":")
    if index > 0:
        return codec[index + 1 :]
    return codec


def strip_address_scheme(address: str) -> str:
    """Strip a "<scheme>:" prefix from a trimmed remote address."""
    address = address.strip()
    index = address.find(":")
    if index > 0:
        return address[index + 1 :]
    return address


def parse_mute_status(data: Mapping[str, Any] | None) -> MuteStatus | None:
    """Extract the phone mute state from a communication info payload."""
    state = get_str(data, FIELD_PHONE_MUTE_STATE)
    if state is None:
        return None
    state = state.strip()
    if state.lower() == VALUE_TRUE.lower():
        return MuteStatus.MUTED
    if state.lower() == VALUE_FALSE.lower():
        return MuteStatus.UNMUTED
    _LOGGER.debug("Unrecognized mute state: %r", state)
    return None


def parse_config_properties(
    data: Mapping[str, Any] | None,
) -> dict[str, ConfigProperty]:
    """Convert a config/get payload into config properties keyed by name."""
    properties: dict[str, ConfigProperty] = {}
    for name, wrapper in (data or {}).items():
        if not isinstance(wrapper, Mapping):
            continue
        properties[name] = ConfigProperty(
            value=get_str(wrapper, FIELD_CONFIG_VALUE),
            source=get_str(wrapper, FIELD_CONFIG_SOURCE),
        )
    return properties


def calculate_packet_loss_percentage(
    audio_lost: int | None,
    video_lost: int | None,
    audio_expected: int | None,
    video_expected: int | None,
) -> float | None:
    """Derive receive packet loss over audio and video, missing parts as zero."""
    lost = (audio_lost or 0) + (video_lost or 0)
    expected = (audio_expected or 0) + (video_expected or 0)
    if expected <= 0:
        return None
    return lost / expected * 100


# Structured normalizers


def is_call_connected(data: Mapping[str, Any] | None) -> bool:
    """Check if a call status payload reports the "Connected" state."""
    call_state = get_str(data, FIELD_CALL_STATE)
    return (
        call_state is not None
        and call_state.strip().lower() == VALUE_CONNECTED.lower()
    )


def parse_call_stats(data: Mapping[str, Any] | None) -> CallStats | None:
    """Build call statistics from a call status payload.

    Only a call in the "Connected" state counts; connecting, dialing and
    proceeding calls are reported as no call at all.
    """
    if not is_call_connected(data):
        return None

    remote_address = get_str(data, FIELD_REMOTE_PARTY_NUMBER)
    protocol = get_str(data, FIELD_PROTOCOL)
    if protocol is None or protocol == VALUE_AUTO:
        protocol = _infer_protocol(remote_address) or protocol

    return CallStats(
        call_id=get_str(data, FIELD_CALL_HANDLE),
        remote_address=remote_address,
        protocol=protocol,
    )


def _infer_protocol(remote_address: str | None) -> str | None:
    if not remote_address:
        return None
    index = remote_address.find(":")
    if index <= 0:
        return None
    prefix = remote_address[:index]
    if prefix.upper() in INFERABLE_PROTOCOLS:
        return prefix
    return None


def parse_registration_status(
    lines: Iterable[Mapping[str, Any]],
) -> RegistrationStatus | None:
    """Accumulate registration details over the line info listing.

    The first line that supplies a field wins for that field; scanning stops
    once all three fields are known. An empty listing yields None.
    """
    lines = list(lines)
    if not lines:
        return None

    status = RegistrationStatus()
    registrar_found = registered_found = details_found = False
    for line in lines:
        if not registrar_found:
            registrar = get_str(line, FIELD_PROXY_ADDRESS)
            if registrar is not None:
                status.sip_registrar = registrar
                registrar_found = True

        if not registered_found:
            registered = get_str(line, FIELD_REGISTRATION_STATUS)
            if registered is not None:
                registered_found = True
                if registered.lower() == VALUE_REGISTERED.lower():
                    status.sip_registered = True
                elif registered.lower() == VALUE_UNREGISTERED.lower():
                    status.sip_registered = False

        if not details_found:
            sip_address = get_str(line, FIELD_SIP_ADDRESS)
            if sip_address is not None:
                status.sip_details = f"{FIELD_SIP_ADDRESS}: {sip_address}"
                details_found = True

        if registrar_found and registered_found and details_found:
            break

    return status


def parse_audio_channel_stats(
    stream: Mapping[str, Any], mute_status: MuteStatus | None = None
) -> AudioChannelStats:
    """Build audio channel statistics from a voice stream."""
    stats = AudioChannelStats(
        jitter_rx=get_float(stream, FIELD_JITTER),
        packet_loss_rx=get_int(stream, FIELD_PACKETS_LOST),
    )
    # the codec is the same in both directions
    codec = get_str(stream, FIELD_TX_CODEC)
    if codec is not None:
        stats.codec = clean_protocol(codec)
    if mute_status is not None:
        stats.mute_tx = mute_status == MuteStatus.MUTED
    return stats


@dataclass(frozen=True)
class VideoChannel:
    """Outcome of parsing a video stream."""

    stats: VideoChannelStats | None
    requested_call_rate: int | None


def stream_has_video(
    stream: Mapping[str, Any], requested_call_rate: int | None = None
) -> bool:
    """Tell whether a video stream carries real traffic.

    Audio-only calls still report a zero-filled video stream, so the category
    alone is not enough.
    """
    for key in (FIELD_PACKETS_EXPECTED, FIELD_PACKETS_SENT, FIELD_PACKETS_RECEIVED):
        packets = get_int(stream, key)
        if packets is not None and packets > 0:
            return True
    return requested_call_rate is not None and requested_call_rate > 0


def parse_video_channel_stats(
    stream: Mapping[str, Any], requested_call_rate: int | None = None
) -> VideoChannel:
    """Build video channel statistics from a video stream.

    ``requested_call_rate`` is the rate the device profile trusts from the
    stream, if any. A non-positive rate is dropped so it can be resolved
    from the device configuration instead.
    """
    has_video = stream_has_video(stream, requested_call_rate)
    if requested_call_rate is not None and requested_call_rate <= 0:
        requested_call_rate = None

    if not has_video:
        return VideoChannel(stats=None, requested_call_rate=requested_call_rate)

    stats = VideoChannelStats(
        jitter_rx=get_float(stream, FIELD_JITTER),
        packet_loss_rx=get_int(stream, FIELD_PACKETS_LOST),
        bit_rate_rx=get_int(stream, FIELD_VIDEO_RX_BITRATE),
        bit_rate_tx=get_int(stream, FIELD_VIDEO_TX_BITRATE),
        frame_rate_rx=get_float(stream, FIELD_VIDEO_RX_FRAMERATE),
        frame_rate_tx=get_float(stream, FIELD_VIDEO_TX_FRAMERATE),
        frame_size_rx=_frame_size(
            stream, FIELD_VIDEO_RX_FRAME_WIDTH, FIELD_VIDEO_RX_FRAME_HEIGHT
        ),
        frame_size_tx=_frame_size(
            stream, FIELD_VIDEO_TX_FRAME_WIDTH, FIELD_VIDEO_TX_FRAME_HEIGHT
        ),
    )
    codec = get_str(stream, FIELD_TX_CODEC)
    if codec is not None:
        stats.codec = clean_protocol(codec)
    return VideoChannel(stats=stats, requested_call_rate=requested_call_rate)


def _frame_size(stream: Mapping[str, Any], width_key: str, height_key: str) -> str | None:
    width = get_str(stream, width_key)
    height = get_str(stream, height_key)
    if width is None or height is None:
        return None
    return f"{width}x{height}"


@dataclass(frozen=True)
class MediaStreams:
    """Streams of the media session belonging to the active call."""

    session_found: bool
    voice: Mapping[str, Any] | None = None
    video: list[Mapping[str, Any]] | None = None


def _category_endswith(stream: Mapping[str, Any], suffix: str) -> bool:
    # "0:Voice", "1:Video": the numeric prefix is undocumented device indexing
    category = get_str(stream, FIELD_CATEGORY)
    return category is not None and category.endswith(suffix)


def select_media_streams(
    sessions: Iterable[Mapping[str, Any]], call_id: str | None
) -> MediaStreams:
    """Pick the streams of the media session whose reference is the call id.

    Several sessions are reported when, for example, one call is connected
    and another is on hold. The first voice stream is selected; every video
    stream is returned in order since the first one may carry no traffic.
    """
    for session in sessions:
        if call_id is None or get_str(session, FIELD_REF) != call_id:
            continue
        voice: Mapping[str, Any] | None = None
        video: list[Mapping[str, Any]] = []
        for stream in get_list(session, FIELD_STREAMS):
            if _category_endswith(stream, VALUE_VOICE):
                if voice is None:
                    voice = stream
            elif _category_endswith(stream, VALUE_VIDEO):
                video.append(stream)
        return MediaStreams(session_found=True, voice=voice, video=video)
    return MediaStreams(session_found=False)
