"""Shared fixtures for the Polycom Trio driver tests."""

from __future__ import annotations

from typing import Any

import pytest

from polycom_trio.api_client import TrioAPIClient
from polycom_trio.call_control import TrioCallController
from polycom_trio.profiles import TrioProfile

DEVICE_HOST = "172.31.254.120"


class FakeTransport:
    """Transport double serving canned envelopes by request path.

    A list of envelopes is served in order and its last entry repeats; an
    exception instance is raised instead of returned.
    """

    def __init__(self, host: str = DEVICE_HOST) -> None:
        self.host = host
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, str, Any]] = []

    def respond(self, path: str, data: Any = None, status: str | int = "2000") -> None:
        envelope: dict[str, Any] = {"Status": status}
        if data is not None:
            envelope["data"] = data
        self.responses[path] = envelope

    def respond_sequence(self, path: str, *envelopes: dict[str, Any]) -> None:
        self.responses[path] = list(envelopes)

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    async def execute(self, method: str, path: str, body: Any = None) -> dict[str, Any]:
        self.calls.append((method, path, body))
        if path not in self.responses:
            raise AssertionError(f"Unexpected request {method} {path}")
        response = self.responses[path]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> TrioAPIClient:
    return TrioAPIClient(transport)  # type: ignore[arg-type]


@pytest.fixture
def controller(client: TrioAPIClient) -> TrioCallController:
    return TrioCallController(client, TrioProfile(), poll_interval=0)


# Payloads captured from a Trio 8800


@pytest.fixture
def call_status_data() -> dict[str, str]:
    return {
        "CallHandle": "0xb53e57c0",
        "Type": "Incoming",
        "Protocol": "Auto",
        "CallState": "Connected",
        "LineId": "1",
        "RemotePartyName": "nh-sx80@nh.vnoc1.com",
        "RemotePartyNumber": "nh-sx80",
        "DurationInSeconds": "308",
    }


@pytest.fixture
def device_info_data() -> dict[str, Any]:
    return {
        "ModelNumber": "Trio 8800",
        "AttachedHardware": {},
        "FirmwareRelease": "5.8.0.4145",
        "IPV6Address": "::",
        "DeviceVendor": "Polycom",
        "DeviceType": "hardwareEndpoint",
        "UpTimeSinceLastReboot": "0 Day 22:02:09",
        "IPV4Address": "172.31.254.120",
        "MACAddress": "0004f2fe3ab0",
    }


@pytest.fixture
def voice_stream() -> dict[str, str]:
    return {
        "Ref": "0xb4e5dfa0",
        "RxPayloadSize": "80",
        "Jitter": "1",
        "Category": "0:Voice",
        "PacketsSent": "243",
        "PacketsExpected": "245",
        "TxPayloadSize": "20",
        "OctetsSent": "19440",
        "MaxJitter": "0",
        "PacketsReceived": "244",
        "RxCodec": "3:G.722.1",
        "OctetsReceived": "19520",
        "PacketsLost": "1",
        "Latency": "0",
        "TxCodec": "3:G.722.1",
    }


@pytest.fixture
def video_stream() -> dict[str, str]:
    return {
        "Ref": "0xb4e5e9d8",
        "RxPayloadSize": "v",
        "VideoRxFrameWidth": "320",
        "Jitter": "1",
        "Category": "1:Video",
        "PacketsSent": "0",
        "PacketsExpected": "136",
        "TxPayloadSize": "v",
        "VideoTxFramerate": "0",
        "OctetsSent": "0",
        "MaxJitter": "2",
        "VideoRxFramerate": "16",
        "PacketsReceived": "136",
        "VideoTxActBitrateKbps": "0",
        "RxCodec": "24:H.264",
        "OctetsReceived": "40910",
        "PacketsLost": "1",
        "Latency": "0",
        "TxCodec": "24:H.264",
        "VideoTxFrameWidth": "1280",
        "VideoTxFrameHeight": "720",
        "VideoTxConfigBitrateKbps": "448",
        "VideoRxFrameHeight": "180",
        "VideoRxActBitrateKbps": "319",
    }


@pytest.fixture
def idle_video_stream() -> dict[str, str]:
    return {
        "Category": "1:Video",
        "PacketsSent": "0",
        "PacketsExpected": "0",
        "PacketsReceived": "0",
        "PacketsLost": "0",
        "TxCodec": "3:G.722.1",
        "VideoTxConfigBitrateKbps": "0",
    }
