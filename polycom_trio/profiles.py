"""Model-specific behaviour for the phone families the driver supports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .const import FIELD_VIDEO_TX_CONFIG_BITRATE, MODEL_TRIO, MODEL_VVX
from .models import DeviceVersion
from .parsers import get_int

# In-call statistics first appeared in Trio firmware 5.8; older releases
# freeze and need a reboot when sessionStats is requested.
IN_CALL_STATS_MIN_MAJOR = 5
IN_CALL_STATS_MIN_MINOR = 8


class DeviceProfile:
    """Hooks the controller consults where device families differ."""

    name = "generic"

    def requested_video_call_rate(self, stream: Mapping[str, Any]) -> int | None:
        """Return the requested video call rate reported by a video stream."""
        return get_int(stream, FIELD_VIDEO_TX_CONFIG_BITRATE)

    def can_retrieve_in_call_stats(self, version: DeviceVersion | None) -> bool:
        """Tell whether the firmware can safely report session statistics."""
        return True

    @property
    def needs_firmware_version(self) -> bool:
        """True when the in-call stats gate depends on the firmware version."""
        return False

    @property
    def resolves_call_rate_from_config(self) -> bool:
        """True when a missing requested rate is read from video.callRate."""
        return False


class TrioProfile(DeviceProfile):
    """Polycom Trio.

    Trio 5.8 reports nonsense for the requested video rate, so the stream
    value is ignored and the rate is resolved from the video.callRate config
    property instead.
    """

    name = MODEL_TRIO

    def requested_video_call_rate(self, stream: Mapping[str, Any]) -> int | None:
        return None

    def can_retrieve_in_call_stats(self, version: DeviceVersion | None) -> bool:
        if version is None or version.major is None:
            return False
        if version.major > IN_CALL_STATS_MIN_MAJOR:
            return True
        return (
            version.major == IN_CALL_STATS_MIN_MAJOR
            and version.minor is not None
            and version.minor >= IN_CALL_STATS_MIN_MINOR
        )

    @property
    def needs_firmware_version(self) -> bool:
        return True

    @property
    def resolves_call_rate_from_config(self) -> bool:
        return True


class VVXProfile(DeviceProfile):
    """Polycom VVX: trusts the stream-reported rate and has no stats defect."""

    name = MODEL_VVX


PROFILES: dict[str, type[DeviceProfile]] = {
    MODEL_TRIO: TrioProfile,
    MODEL_VVX: VVXProfile,
}


def get_profile(model: str) -> DeviceProfile:
    """Return the profile for a model name."""
    try:
        return PROFILES[model.lower()]()
    except KeyError as err:
        raise ValueError(f"Unsupported device model: {model}") from err
