"""Data models for the Polycom Trio driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any

from .const import CONTROL_GRACE_PERIOD


class CallStatusState(str, Enum):
    """Call state as reported to the host."""

    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"


class CallPhase(str, Enum):
    """Perceived lifecycle phase of the current call."""

    IDLE = "idle"
    DIALING = "dialing"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class MuteStatus(str, Enum):
    """Microphone mute state."""

    MUTED = "Muted"
    UNMUTED = "Unmuted"


@total_ordering
@dataclass(frozen=True)
class DeviceVersion:
    """Firmware version parsed from a dotted release string."""

    version: str
    major: int | None = None
    minor: int | None = None
    patch: int | None = None
    build: int | None = None

    @classmethod
    def parse(cls, version: str) -> DeviceVersion:
        """Parse "5.7.1.4145" style strings; unparseable parts become None."""
        parts: list[int | None] = []
        for chunk in version.strip().split(".")[:4]:
            digits = ""
            for char in chunk:
                if not char.isdigit():
                    break
                digits += char
            parts.append(int(digits) if digits else None)
        parts.extend([None] * (4 - len(parts)))
        return cls(version.strip(), *parts)

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return the numeric components, missing ones as zero."""
        return (
            self.major or 0,
            self.minor or 0,
            self.patch or 0,
            self.build or 0,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DeviceVersion):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceVersion):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __str__(self) -> str:
        return self.version


@dataclass
class CallStatus:
    """Status of the current call as observed by one poll."""

    state: CallStatusState = CallStatusState.DISCONNECTED
    call_id: str | None = None

    @property
    def connected(self) -> bool:
        """Check if the call is connected."""
        return self.state == CallStatusState.CONNECTED


@dataclass
class CallStats:
    """Statistics for the active call."""

    call_id: str | None = None
    remote_address: str | None = None
    protocol: str | None = None
    call_rate_rx: int | None = None  # kbps, video only
    call_rate_tx: int | None = None  # kbps, video only
    requested_call_rate: int | None = None
    percent_packet_loss_rx: float | None = None


@dataclass
class AudioChannelStats:
    """Statistics for the audio channel of the active call."""

    codec: str | None = None
    jitter_rx: float | None = None
    packet_loss_rx: int | None = None
    mute_tx: bool | None = None


@dataclass
class VideoChannelStats:
    """Statistics for the video channel of the active call."""

    codec: str | None = None
    jitter_rx: float | None = None
    packet_loss_rx: int | None = None
    bit_rate_rx: int | None = None
    bit_rate_tx: int | None = None
    frame_rate_rx: float | None = None
    frame_rate_tx: float | None = None
    frame_size_rx: str | None = None
    frame_size_tx: str | None = None


@dataclass
class RegistrationStatus:
    """SIP line registration as reported by the line info listing."""

    sip_registrar: str | None = None
    sip_registered: bool | None = None
    sip_details: str | None = None


@dataclass
class EndpointStatistics:
    """Call and registration part of a statistics snapshot."""

    in_call: bool = False
    registration_status: RegistrationStatus | None = None
    call_stats: CallStats | None = None
    audio_channel_stats: AudioChannelStats | None = None
    video_channel_stats: VideoChannelStats | None = None


@dataclass(frozen=True)
class ConfigProperty:
    """Value of a device config property and where it came from."""

    value: str | None
    source: str | None = None


@dataclass(frozen=True)
class ControlButton:
    """Button the host can render to trigger a control command."""

    name: str
    label: str
    label_pressed: str
    grace_period_ms: int = CONTROL_GRACE_PERIOD


@dataclass
class DeviceSnapshot:
    """Complete point-in-time statistics for the device."""

    endpoint: EndpointStatistics
    statistics: dict[str, str] = field(default_factory=dict)
    controls: list[ControlButton] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for the host."""
        endpoint = self.endpoint
        return {
            "in_call": endpoint.in_call,
            "registration_status": _as_dict(endpoint.registration_status),
            "call_stats": _as_dict(endpoint.call_stats),
            "audio_channel_stats": _as_dict(endpoint.audio_channel_stats),
            "video_channel_stats": _as_dict(endpoint.video_channel_stats),
            "statistics": dict(self.statistics),
            "controls": [_as_dict(control) for control in self.controls],
        }


def _as_dict(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    return dict(vars(value))
