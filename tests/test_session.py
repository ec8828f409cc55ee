"""Test ConnectionManager session lifecycle."""

from __future__ import annotations

import asyncio

import pytest

from ircoutput.config import AdapterConfig
from ircoutput.errors import IRCConnectionError, JoinError, SendError
from ircoutput.models import IRCChannelMessage, SessionState
from ircoutput.session import VERSION_STRING, ConnectionManager
from tests.mocks import FakeTransport, YieldingTransport

CONFIG = AdapterConfig(hostname="irc.example.com", port=6697, password="secret", nickname="logbot")


def _make_session(timeout: float = 1.0) -> tuple[ConnectionManager, FakeTransport]:
    transport = FakeTransport()
    return ConnectionManager(CONFIG, transport, timeout=timeout), transport


class _HangingTransport(FakeTransport):
    async def connect(self, hostname, port, password):
        await asyncio.sleep(10)


class TestEnsureConnected:
    @pytest.mark.asyncio
    async def test_starts_disconnected(self):
        session, transport = _make_session()
        assert session.state is SessionState.DISCONNECTED
        assert transport.connects == []

    @pytest.mark.asyncio
    async def test_connects_with_config_and_identity(self):
        # Arrange
        session, transport = _make_session()

        # Act
        await session.ensure_connected()

        # Assert
        assert session.state is SessionState.CONNECTED
        assert transport.connects == [("irc.example.com", 6697, "secret")]
        assert transport.identity == ("logbot", "logbot", VERSION_STRING)

    @pytest.mark.asyncio
    async def test_second_call_is_noop(self):
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_connected()
        assert len(transport.connects) == 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_connect_once(self):
        transport = YieldingTransport()
        session = ConnectionManager(CONFIG, transport, timeout=1.0)
        await asyncio.gather(session.ensure_connected(), session.ensure_connected())
        assert len(transport.connects) == 1
        assert session.state is SessionState.CONNECTED

    @pytest.mark.asyncio
    async def test_connect_failure_raises_connection_error(self):
        # Arrange
        session, transport = _make_session()
        transport.fail_connect = OSError("connection refused")

        # Act & Assert
        with pytest.raises(IRCConnectionError) as exc_info:
            await session.ensure_connected()
        assert isinstance(exc_info.value.original_error, OSError)
        assert session.state is SessionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_connect_timeout_raises_connection_error(self):
        session = ConnectionManager(CONFIG, _HangingTransport(), timeout=0.01)
        with pytest.raises(IRCConnectionError) as exc_info:
            await session.ensure_connected()
        assert exc_info.value.code == "timeout"

    @pytest.mark.asyncio
    async def test_dropped_link_starts_new_session(self):
        # Arrange
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_joined("#ops")
        transport.drop()

        # Act
        await session.ensure_connected()

        # Assert
        assert len(transport.connects) == 2
        assert session.joined_channels == frozenset()


class TestEnsureJoined:
    @pytest.mark.asyncio
    async def test_joins_once(self):
        # Arrange
        session, transport = _make_session()
        await session.ensure_connected()

        # Act
        await session.ensure_joined("#ops")
        await session.ensure_joined("#ops")

        # Assert
        assert transport.joins == ["#ops"]
        assert session.joined_channels == frozenset({"#ops"})

    @pytest.mark.asyncio
    async def test_joined_channels_grow(self):
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_joined("#a")
        await session.ensure_joined("#b")
        assert session.joined_channels == frozenset({"#a", "#b"})

    @pytest.mark.asyncio
    async def test_join_before_connect_fails(self):
        session, transport = _make_session()
        with pytest.raises(JoinError):
            await session.ensure_joined("#ops")
        assert transport.joins == []

    @pytest.mark.asyncio
    async def test_join_failure_not_recorded(self):
        # Arrange
        session, transport = _make_session()
        await session.ensure_connected()
        transport.fail_join = RuntimeError("banned")

        # Act & Assert
        with pytest.raises(JoinError):
            await session.ensure_joined("#ops")
        assert "#ops" not in session.joined_channels

    @pytest.mark.asyncio
    async def test_concurrent_joins_join_once(self):
        transport = YieldingTransport()
        session = ConnectionManager(CONFIG, transport, timeout=1.0)
        await session.ensure_connected()
        await asyncio.gather(session.ensure_joined("#ops"), session.ensure_joined("#ops"))
        assert transport.joins == ["#ops"]


class TestSend:
    @pytest.mark.asyncio
    async def test_send_to_joined_channel(self):
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_joined("#ops")
        await session.send(IRCChannelMessage(channel="#ops", text="hello"))
        assert transport.sent == [("#ops", "hello")]

    @pytest.mark.asyncio
    async def test_send_requires_join(self):
        session, transport = _make_session()
        await session.ensure_connected()
        with pytest.raises(SendError) as exc_info:
            await session.send(IRCChannelMessage(channel="#ops", text="hello"))
        assert exc_info.value.code == "not_joined"
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_send_failure_raises_send_error(self):
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_joined("#ops")
        transport.fail_send = ConnectionResetError("reset")
        with pytest.raises(SendError):
            await session.send(IRCChannelMessage(channel="#ops", text="hello"))


class TestClose:
    @pytest.mark.asyncio
    async def test_close_disconnects_and_resets(self):
        # Arrange
        session, transport = _make_session()
        await session.ensure_connected()
        await session.ensure_joined("#ops")

        # Act
        await session.close()

        # Assert
        assert transport.disconnects == 1
        assert session.state is SessionState.DISCONNECTED
        assert session.joined_channels == frozenset()

    @pytest.mark.asyncio
    async def test_close_without_connect(self):
        session, transport = _make_session()
        await session.close()
        assert transport.disconnects == 0
