"""Tests for call control and in-call statistics."""

import pytest

from polycom_trio.call_control import TrioCallController
from polycom_trio.const import DialProtocol
from polycom_trio.exceptions import TrioCommandError, TrioNotImplementedError
from polycom_trio.models import (
    CallPhase,
    CallStats,
    CallStatusState,
    EndpointStatistics,
    MuteStatus,
)
from polycom_trio.profiles import VVXProfile

NOT_IN_CALL = {"Status": "4007"}


def _connected(call_status_data, **overrides):
    return {"Status": "2000", "data": dict(call_status_data, **overrides)}


class TestDial:
    @pytest.mark.asyncio
    async def test_resolves_call_handle(self, controller, transport, call_status_data):
        transport.respond("callctrl/dial")
        transport.respond_sequence(
            "webCallControl/callStatus",
            NOT_IN_CALL,
            _connected(call_status_data, CallState="Dialing", RemotePartyNumber=""),
            _connected(call_status_data, RemotePartyNumber="sip:NH-SX80"),
        )

        call_id = await controller.dial("nh-sx80", DialProtocol.SIP)

        assert call_id == "0xb53e57c0"
        assert controller.phase == CallPhase.CONNECTED
        assert transport.calls[0] == (
            "POST",
            "callctrl/dial",
            {"data": {"Dest": "nh-sx80", "Line": "1", "Type": "SIP"}},
        )
        assert transport.paths().count("webCallControl/callStatus") == 3

    @pytest.mark.asyncio
    async def test_unresolved_after_poll_window(self, controller, transport):
        transport.respond("callctrl/dial")
        transport.respond("webCallControl/callStatus", status="4007")

        assert await controller.dial("nh-sx80") is None
        assert transport.paths().count("webCallControl/callStatus") == 5
        assert controller.phase == CallPhase.DIALING

    @pytest.mark.asyncio
    async def test_other_call_is_not_matched(self, controller, transport, call_status_data):
        transport.respond("callctrl/dial")
        transport.respond("webCallControl/callStatus", dict(call_status_data))

        assert await controller.dial("someone-else") is None

    @pytest.mark.asyncio
    async def test_waits_before_each_poll(self, client, transport, monkeypatch):
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr("polycom_trio.call_control.asyncio.sleep", fake_sleep)
        transport.respond("callctrl/dial")
        transport.respond("webCallControl/callStatus", status="4007")

        await TrioCallController(client).dial("nh-sx80")

        assert delays == [1.0] * 5

    @pytest.mark.asyncio
    async def test_isdn_dials_as_tel(self, controller, transport):
        transport.respond("callctrl/dial")
        transport.respond("webCallControl/callStatus", status="4007")

        await controller.dial("5551234", "isdn")

        assert transport.calls[0][2]["data"]["Type"] == "TEL"

    @pytest.mark.asyncio
    async def test_empty_destination(self, controller, transport):
        with pytest.raises(ValueError):
            await controller.dial("  ")
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_unknown_protocol(self, controller, transport):
        with pytest.raises(ValueError):
            await controller.dial("nh-sx80", "xmpp")
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_handle_resolved_while_still_dialing(
        self, controller, transport, call_status_data
    ):
        transport.respond("callctrl/dial")
        transport.respond(
            "webCallControl/callStatus", dict(call_status_data, CallState="Dialing")
        )

        assert await controller.dial("nh-sx80") == "0xb53e57c0"
        assert controller.phase == CallPhase.DIALING
        assert transport.paths().count("webCallControl/callStatus") == 1

    @pytest.mark.asyncio
    async def test_rejected_dial(self, controller, transport):
        transport.respond("callctrl/dial", status="4002")
        with pytest.raises(TrioCommandError):
            await controller.dial("nh-sx80")
        assert controller.phase == CallPhase.IDLE


class TestHangup:
    @pytest.mark.asyncio
    async def test_ends_given_call(self, controller, transport):
        transport.respond("callctrl/endCall")
        await controller.hangup("0xb53e57c0")
        assert transport.calls == [
            ("POST", "callctrl/endCall", {"data": {"Ref": "0xb53e57c0"}})
        ]
        assert controller.phase == CallPhase.DISCONNECTED

    @pytest.mark.asyncio
    async def test_ends_current_call(self, controller, transport, call_status_data):
        transport.respond("webCallControl/callStatus", call_status_data)
        transport.respond("callctrl/endCall")
        await controller.hangup()
        assert transport.calls[-1][2] == {"data": {"Ref": "0xb53e57c0"}}

    @pytest.mark.asyncio
    async def test_no_current_call(self, controller, transport):
        transport.respond("webCallControl/callStatus", status="4007")
        await controller.hangup()
        assert transport.paths() == ["webCallControl/callStatus"]

    @pytest.mark.asyncio
    async def test_idempotent(self, controller, transport):
        transport.respond_sequence(
            "callctrl/endCall", {"Status": "2000"}, {"Status": "4007"}
        )
        await controller.hangup("0xb53e57c0")
        await controller.hangup("0xb53e57c0")
        assert controller.phase == CallPhase.DISCONNECTED

    @pytest.mark.asyncio
    async def test_other_failures_raise(self, controller, transport):
        transport.respond("callctrl/endCall", status="5000")
        with pytest.raises(TrioCommandError):
            await controller.hangup("0xb53e57c0")


class TestMute:
    @pytest.mark.asyncio
    async def test_mute_and_unmute(self, controller, transport):
        transport.respond("callctrl/mute")
        await controller.mute()
        await controller.unmute()
        assert [body for _, _, body in transport.calls] == [
            {"data": {"state": "1"}},
            {"data": {"state": "0"}},
        ]

    @pytest.mark.asyncio
    async def test_not_in_call_is_ignored(self, controller, transport):
        transport.respond("callctrl/mute", status="4007")
        await controller.mute()

    @pytest.mark.asyncio
    async def test_retrieve_mute_status(self, controller, transport):
        transport.respond("mgmt/media/communicationInfo", {"PhoneMuteState": "True"})
        assert await controller.retrieve_mute_status() is MuteStatus.MUTED

    @pytest.mark.asyncio
    async def test_send_message_unsupported(self, controller, transport):
        with pytest.raises(TrioNotImplementedError):
            await controller.send_message("hello")
        with pytest.raises(NotImplementedError):
            await controller.send_message("hello")
        assert transport.calls == []


class TestCallStatus:
    @pytest.mark.asyncio
    async def test_connected(self, controller, transport, call_status_data):
        transport.respond("webCallControl/callStatus", call_status_data)
        status = await controller.retrieve_call_status()
        assert status.state == CallStatusState.CONNECTED
        assert status.call_id == "0xb53e57c0"
        assert status.connected
        assert controller.phase == CallPhase.CONNECTED

    @pytest.mark.asyncio
    async def test_matching_call_id(self, controller, transport, call_status_data):
        transport.respond("webCallControl/callStatus", call_status_data)
        status = await controller.retrieve_call_status("0xB53E57C0")
        assert status.connected

    @pytest.mark.asyncio
    async def test_other_call_id(self, controller, transport, call_status_data):
        transport.respond("webCallControl/callStatus", call_status_data)
        status = await controller.retrieve_call_status("0xdeadbeef")
        assert status.state == CallStatusState.DISCONNECTED
        assert status.call_id is None

    @pytest.mark.asyncio
    async def test_not_in_call(self, controller, transport):
        transport.respond("webCallControl/callStatus", status="4007")
        status = await controller.retrieve_call_status()
        assert not status.connected
        assert controller.phase == CallPhase.IDLE

    @pytest.mark.asyncio
    async def test_disconnect_observed(self, controller, transport, call_status_data):
        transport.respond_sequence(
            "webCallControl/callStatus",
            {"Status": "2000", "data": call_status_data},
            NOT_IN_CALL,
        )
        await controller.retrieve_call_status()
        await controller.retrieve_call_status()
        assert controller.phase == CallPhase.DISCONNECTED

    @pytest.mark.asyncio
    async def test_padded_state(self, controller, transport, call_status_data):
        transport.respond(
            "webCallControl/callStatus", dict(call_status_data, CallState=" connected ")
        )
        status = await controller.retrieve_call_status()
        assert status.connected
        assert status.call_id == "0xb53e57c0"

    @pytest.mark.asyncio
    async def test_connecting_is_not_connected(self, controller, transport, call_status_data):
        transport.respond(
            "webCallControl/callStatus", dict(call_status_data, CallState="Proceeding")
        )
        assert not (await controller.retrieve_call_status()).connected


class TestSoftwareVersion:
    @pytest.mark.asyncio
    async def test_version(self, controller, transport, device_info_data):
        transport.respond("mgmt/device/info", device_info_data)
        version = await controller.retrieve_software_version()
        assert str(version) == "5.8.0.4145"

    @pytest.mark.asyncio
    async def test_version_call_does_not_exist(self, controller, transport):
        transport.respond("mgmt/device/info", status="4007")
        assert await controller.retrieve_software_version() is None

    @pytest.mark.asyncio
    async def test_old_firmware_blocks_in_call_stats(self, controller, transport):
        transport.respond("mgmt/device/info", {"FirmwareRelease": "5.7.1.4145"})
        assert not await controller.can_retrieve_in_call_stats()

    @pytest.mark.asyncio
    async def test_vvx_skips_version_query(self, client, transport):
        controller = TrioCallController(client, VVXProfile(), poll_interval=0)
        assert await controller.can_retrieve_in_call_stats()
        assert transport.calls == []


class TestInCallStats:
    @pytest.fixture
    def endpoint(self):
        return EndpointStatistics(
            in_call=True,
            call_stats=CallStats(
                call_id="0xb53e57c0", remote_address="nh-sx80", protocol="Auto"
            ),
        )

    @pytest.fixture
    def session(self, voice_stream, video_stream):
        return {"Ref": "0xb53e57c0", "Streams": [voice_stream, video_stream]}

    @pytest.mark.asyncio
    async def test_audio_and_video(self, controller, transport, endpoint, session):
        transport.respond("mgmt/media/sessionStats", [session])
        transport.respond("mgmt/media/communicationInfo", {"PhoneMuteState": "False"})
        transport.respond(
            "mgmt/config/get", {"video.callRate": {"Value": "448", "Source": "default"}}
        )

        await controller.populate_in_call_stats(endpoint)

        call_stats = endpoint.call_stats
        assert call_stats.call_rate_rx == 319
        assert call_stats.call_rate_tx == 0
        assert call_stats.requested_call_rate == 448
        assert call_stats.percent_packet_loss_rx == pytest.approx(
            (1 + 1) / (245 + 136) * 100
        )
        assert endpoint.audio_channel_stats.codec == "G.722.1"
        assert endpoint.audio_channel_stats.mute_tx is False
        assert endpoint.video_channel_stats.frame_size_rx == "320x180"
        assert transport.calls[-1] == (
            "POST",
            "mgmt/config/get",
            {"data": ["video.callRate"]},
        )

    @pytest.mark.asyncio
    async def test_vvx_uses_stream_call_rate(self, client, transport, endpoint, session):
        controller = TrioCallController(client, VVXProfile(), poll_interval=0)
        transport.respond("mgmt/media/sessionStats", [session])
        transport.respond("mgmt/media/communicationInfo", {"PhoneMuteState": "True"})

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.call_stats.requested_call_rate == 448
        assert endpoint.audio_channel_stats.mute_tx is True
        assert "mgmt/config/get" not in transport.paths()

    @pytest.mark.asyncio
    async def test_vvx_does_not_read_call_rate_config(
        self, client, transport, endpoint, video_stream
    ):
        controller = TrioCallController(client, VVXProfile(), poll_interval=0)
        stream = dict(video_stream, VideoTxConfigBitrateKbps="0")
        transport.respond(
            "mgmt/media/sessionStats", [{"Ref": "0xb53e57c0", "Streams": [stream]}]
        )

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.video_channel_stats.bit_rate_rx == 319
        assert endpoint.call_stats.requested_call_rate is None
        assert transport.paths() == ["mgmt/media/sessionStats"]

    @pytest.mark.asyncio
    async def test_audio_only_call(
        self, controller, transport, endpoint, voice_stream, idle_video_stream
    ):
        transport.respond(
            "mgmt/media/sessionStats",
            [{"Ref": "0xb53e57c0", "Streams": [voice_stream, idle_video_stream]}],
        )
        transport.respond("mgmt/media/communicationInfo", {"FarEndMuteState": []})

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.video_channel_stats is None
        assert endpoint.audio_channel_stats.mute_tx is None
        assert endpoint.call_stats.call_rate_rx is None
        assert endpoint.call_stats.requested_call_rate is None
        assert endpoint.call_stats.percent_packet_loss_rx == pytest.approx(1 / 245 * 100)

    @pytest.mark.asyncio
    async def test_first_video_stream_with_traffic(
        self, controller, transport, endpoint, video_stream, idle_video_stream
    ):
        transport.respond(
            "mgmt/media/sessionStats",
            [{"Ref": "0xb53e57c0", "Streams": [idle_video_stream, video_stream]}],
        )
        transport.respond("mgmt/config/get", {"video.callRate": {"Value": "1024"}})

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.video_channel_stats.bit_rate_rx == 319
        assert endpoint.call_stats.requested_call_rate == 1024
        assert endpoint.audio_channel_stats is None
        assert "mgmt/media/communicationInfo" not in transport.paths()

    @pytest.mark.asyncio
    async def test_call_ended_meanwhile(self, controller, transport, endpoint):
        transport.respond("mgmt/media/sessionStats", [])

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.in_call is False
        assert endpoint.call_stats is None

    @pytest.mark.asyncio
    async def test_no_matching_session(self, controller, transport, endpoint, session):
        transport.respond("mgmt/media/sessionStats", [dict(session, Ref="0x1")])

        await controller.populate_in_call_stats(endpoint)

        assert endpoint.in_call is True
        assert endpoint.audio_channel_stats is None
        assert endpoint.call_stats.percent_packet_loss_rx is None

    @pytest.mark.asyncio
    async def test_retrieve_call_stats(self, controller, transport, call_status_data):
        transport.respond_sequence(
            "webCallControl/callStatus",
            {"Status": "2000", "data": call_status_data},
            NOT_IN_CALL,
        )
        stats = await controller.retrieve_call_stats()
        assert stats.call_id == "0xb53e57c0"
        assert await controller.retrieve_call_stats() is None
