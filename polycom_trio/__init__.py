"""Normalized driver for Polycom Trio desk phones."""

from __future__ import annotations

from .api_client import ApiResponse, TrioAPIClient
from .call_control import TrioCallController
from .config import TrioConfig
from .const import DeviceStatus, DialProtocol
from .device import PolycomTrio
from .exceptions import (
    TrioCommandError,
    TrioConfigError,
    TrioConnectionError,
    TrioError,
    TrioNotImplementedError,
)
from .mapping import PropertyMapper
from .models import (
    AudioChannelStats,
    CallPhase,
    CallStats,
    CallStatus,
    CallStatusState,
    ControlButton,
    DeviceSnapshot,
    DeviceVersion,
    EndpointStatistics,
    MuteStatus,
    RegistrationStatus,
    VideoChannelStats,
)
from .profiles import DeviceProfile, TrioProfile, VVXProfile
from .statistics import TrioStatisticsCollector
from .transport import TrioTransport

__all__ = [
    "ApiResponse",
    "AudioChannelStats",
    "CallPhase",
    "CallStats",
    "CallStatus",
    "CallStatusState",
    "ControlButton",
    "DeviceProfile",
    "DeviceSnapshot",
    "DeviceStatus",
    "DeviceVersion",
    "DialProtocol",
    "EndpointStatistics",
    "MuteStatus",
    "PolycomTrio",
    "PropertyMapper",
    "RegistrationStatus",
    "TrioAPIClient",
    "TrioCallController",
    "TrioCommandError",
    "TrioConfig",
    "TrioConfigError",
    "TrioConnectionError",
    "TrioError",
    "TrioNotImplementedError",
    "TrioProfile",
    "TrioStatisticsCollector",
    "TrioTransport",
    "VVXProfile",
    "VideoChannelStats",
]
