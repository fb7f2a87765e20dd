"""Tests for the host-facing driver."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from polycom_trio.device import PolycomTrio
from polycom_trio.exceptions import TrioConfigError, TrioConnectionError
from polycom_trio.models import CallPhase
from polycom_trio.profiles import VVXProfile

CONFIG = {"host": "172.31.254.120", "username": "Polycom", "password": "789"}


@pytest.fixture
def device():
    return PolycomTrio(MagicMock(), CONFIG)


def test_wiring(device):
    assert device.host == "172.31.254.120"
    assert device.call_phase == CallPhase.IDLE
    assert device.api_client.host == "172.31.254.120"
    assert device.call_controller.profile.name == "trio"


def test_vvx_profile():
    device = PolycomTrio(MagicMock(), dict(CONFIG, model="vvx"))
    assert isinstance(device.call_controller.profile, VVXProfile)


def test_invalid_config():
    with pytest.raises(TrioConfigError):
        PolycomTrio(MagicMock(), {"host": "172.31.254.120"})


@pytest.mark.asyncio
async def test_connection_ok(device, monkeypatch, device_info_data):
    monkeypatch.setattr(
        device._transport,
        "execute",
        AsyncMock(return_value={"Status": "2000", "data": device_info_data}),
    )
    assert await device.test_connection() is True


@pytest.mark.asyncio
async def test_connection_failed(device, monkeypatch):
    monkeypatch.setattr(
        device._transport, "execute", AsyncMock(side_effect=TrioConnectionError("x"))
    )
    assert await device.test_connection() is False


@pytest.mark.asyncio
async def test_delegates_call_control(device, monkeypatch):
    execute = AsyncMock(return_value={"Status": "2000"})
    monkeypatch.setattr(device._transport, "execute", execute)

    await device.mute()
    await device.hangup("0xb53e57c0")

    execute.assert_any_await("POST", "callctrl/mute", {"data": {"state": "1"}})
    execute.assert_awaited_with(
        "POST", "callctrl/endCall", {"data": {"Ref": "0xb53e57c0"}}
    )
    assert device.call_phase == CallPhase.DISCONNECTED
