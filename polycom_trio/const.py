"""Constants for the Polycom Trio driver."""

from enum import StrEnum
from typing import Final

# Network configuration
DEFAULT_PORT: Final = 443
API_PREFIX: Final = "api/v1/"
DEFAULT_REQUEST_TIMEOUT: Final = 10.0  # seconds

# Dial resolution (the dial API does not return a call handle)
DIAL_POLL_ATTEMPTS: Final = 5
DIAL_POLL_INTERVAL: Final = 1.0  # seconds
DEFAULT_LINE: Final = "1"

# config/get rejects more keys than this with status 4009
MAX_CONFIG_KEYS: Final = 20

# Grace period for restart/reboot buttons (milliseconds)
CONTROL_GRACE_PERIOD: Final = 30000

# API endpoints (relative to API_PREFIX)
API_DEVICE_INFO: Final = "mgmt/device/info"
API_NETWORK_STATS: Final = "mgmt/network/stats"
API_RUNNING_CONFIG: Final = "mgmt/device/runningConfig"
API_POLL_STATUS: Final = "mgmt/pollForStatus"
API_TRANSFER_TYPE: Final = "mgmt/transferType/get"
API_LINE_INFO: Final = "mgmt/lineInfo"
API_CALL_STATUS: Final = "webCallControl/callStatus"
API_COMMUNICATION_INFO: Final = "mgmt/media/communicationInfo"
API_SESSION_STATS: Final = "mgmt/media/sessionStats"
API_CONFIG_GET: Final = "mgmt/config/get"
API_CALL_DIAL: Final = "callctrl/dial"
API_CALL_END: Final = "callctrl/endCall"
API_CALL_MUTE: Final = "callctrl/mute"
API_SAFE_RESTART: Final = "mgmt/safeRestart"
API_SAFE_REBOOT: Final = "mgmt/safeReboot"

# Payload field names
FIELD_DATA: Final = "data"
FIELD_STATUS: Final = "Status"
FIELD_FIRMWARE_RELEASE: Final = "FirmwareRelease"
FIELD_CALL_HANDLE: Final = "CallHandle"
FIELD_CALL_STATE: Final = "CallState"
FIELD_PROTOCOL: Final = "Protocol"
FIELD_REMOTE_PARTY_NUMBER: Final = "RemotePartyNumber"
FIELD_PHONE_MUTE_STATE: Final = "PhoneMuteState"
FIELD_PROXY_ADDRESS: Final = "ProxyAddress"
FIELD_REGISTRATION_STATUS: Final = "RegistrationStatus"
FIELD_SIP_ADDRESS: Final = "SIPAddress"
FIELD_REF: Final = "Ref"
FIELD_STREAMS: Final = "Streams"
FIELD_CATEGORY: Final = "Category"
FIELD_TX_CODEC: Final = "TxCodec"
FIELD_JITTER: Final = "Jitter"
FIELD_PACKETS_LOST: Final = "PacketsLost"
FIELD_PACKETS_EXPECTED: Final = "PacketsExpected"
FIELD_PACKETS_SENT: Final = "PacketsSent"
FIELD_PACKETS_RECEIVED: Final = "PacketsReceived"
FIELD_VIDEO_RX_BITRATE: Final = "VideoRxActBitrateKbps"
FIELD_VIDEO_TX_BITRATE: Final = "VideoTxActBitrateKbps"
FIELD_VIDEO_TX_CONFIG_BITRATE: Final = "VideoTxConfigBitrateKbps"
FIELD_VIDEO_RX_FRAMERATE: Final = "VideoRxFramerate"
FIELD_VIDEO_TX_FRAMERATE: Final = "VideoTxFramerate"
FIELD_VIDEO_RX_FRAME_WIDTH: Final = "VideoRxFrameWidth"
FIELD_VIDEO_RX_FRAME_HEIGHT: Final = "VideoRxFrameHeight"
FIELD_VIDEO_TX_FRAME_WIDTH: Final = "VideoTxFrameWidth"
FIELD_VIDEO_TX_FRAME_HEIGHT: Final = "VideoTxFrameHeight"
FIELD_CONFIG_VALUE: Final = "Value"
FIELD_CONFIG_SOURCE: Final = "Source"

# Request body keys
REQ_DEST: Final = "Dest"
REQ_LINE: Final = "Line"
REQ_TYPE: Final = "Type"
REQ_REF: Final = "Ref"
REQ_STATE: Final = "state"

# Payload values
VALUE_AUTO: Final = "Auto"
VALUE_CONNECTED: Final = "Connected"
VALUE_REGISTERED: Final = "Registered"
VALUE_UNREGISTERED: Final = "Unregistered"
VALUE_VOICE: Final = "Voice"
VALUE_VIDEO: Final = "Video"
VALUE_TRUE: Final = "True"
VALUE_FALSE: Final = "False"

# Config property names (see "Field Help" in the device web UI)
CONFIG_VIDEO_CALL_RATE: Final = "video.callRate"

# Control property names
CONTROL_RESTART: Final = "RestartDevice"
CONTROL_REBOOT: Final = "RebootDevice"

# Uptime entries rewritten after property mapping
STAT_DEVICE_UPTIME: Final = "DeviceInfo#Uptime"
STAT_NETWORK_UPTIME: Final = "NetworkInfo#Uptime"

# Property mapping groups
GROUP_DEVICE_INFO: Final = "DeviceInfo"
GROUP_NETWORK_INFO: Final = "NetworkInfo"
GROUP_RUNNING_CONFIG: Final = "RunningConfig"
GROUP_DEVICE_STATUS: Final = "DeviceStatus"
GROUP_TRANSFER_TYPE: Final = "TransferType"

# Config keys
CONF_HOST: Final = "host"
CONF_PORT: Final = "port"
CONF_USERNAME: Final = "username"
CONF_PASSWORD: Final = "password"
CONF_VERIFY_SSL: Final = "verify_ssl"
CONF_REQUEST_TIMEOUT: Final = "request_timeout"
CONF_MODEL: Final = "model"
CONF_DIAL_POLL_ATTEMPTS: Final = "dial_poll_attempts"
CONF_DIAL_POLL_INTERVAL: Final = "dial_poll_interval"

MODEL_TRIO: Final = "trio"
MODEL_VVX: Final = "vvx"


class DeviceStatus(StrEnum):
    """Status codes reported in the "Status" field of every response."""

    SUCCESS = "2000"
    INVALID_PARAMS = "4000"
    DEVICE_BUSY = "4001"
    LINE_NOT_REGISTERED = "4002"
    NOT_ALLOWED = "4003"
    NOT_SUPPORTED = "4004"
    LINE_MISSING = "4005"
    URLS_NOT_CONFIGURED = "4006"
    CALL_DOES_NOT_EXIST = "4007"
    EXPORT_FAILED = "4008"
    INPUT_LIMIT_EXCEEDED = "4009"
    DEFAULT_PASSWORD = "4010"
    PROCESSING_FAILED = "5000"


STATUS_DESCRIPTIONS: Final = {
    DeviceStatus.SUCCESS: "API executed successfully",
    DeviceStatus.INVALID_PARAMS: "Invalid input parameters",
    DeviceStatus.DEVICE_BUSY: "Device busy",
    DeviceStatus.LINE_NOT_REGISTERED: "Line not registered",
    DeviceStatus.NOT_ALLOWED: "Operation not allowed",
    DeviceStatus.NOT_SUPPORTED: "Operation not supported",
    DeviceStatus.LINE_MISSING: "Line does not exist",
    DeviceStatus.URLS_NOT_CONFIGURED: "URLs not configured",
    DeviceStatus.CALL_DOES_NOT_EXIST: "Call does not exist",
    DeviceStatus.EXPORT_FAILED: "Configuration export failed",
    DeviceStatus.INPUT_LIMIT_EXCEEDED: "Input size limit exceeded",
    DeviceStatus.DEFAULT_PASSWORD: "Default password not allowed",
    DeviceStatus.PROCESSING_FAILED: "Failed to process request",
}


class DialProtocol(StrEnum):
    """Protocols accepted when placing a call."""

    SIP = "SIP"
    H323 = "H323"
    TEL = "TEL"
    ISDN = "ISDN"


# Remote address prefixes the protocol can be inferred from
INFERABLE_PROTOCOLS: Final = frozenset({"SIP", "H323", "TEL"})


def describe_status(status: str) -> str:
    """Return a human readable description for a device status code."""
    try:
        return STATUS_DESCRIPTIONS[DeviceStatus(status)]
    except ValueError:
        return "Unknown status"
