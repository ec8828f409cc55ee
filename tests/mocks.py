"""Fake IRC transport for testing the output without a server."""

from __future__ import annotations

import asyncio


class FakeTransport:
    """IRCTransport that records calls instead of talking to a server."""

    def __init__(self) -> None:
        self.identity: tuple[str, str, str] | None = None
        self.connects: list[tuple[str, int | None, str | None]] = []
        self.joins: list[str] = []
        self.sent: list[tuple[str, str]] = []
        self.disconnects = 0
        self._connected = False
        self.fail_connect: BaseException | None = None
        self.fail_join: BaseException | None = None
        self.fail_send: BaseException | None = None

    def set_identity(self, nickname: str, login: str, version: str) -> None:
        self.identity = (nickname, login, version)

    async def connect(self, hostname: str, port: int | None, password: str | None) -> None:
        self.connects.append((hostname, port, password))
        if self.fail_connect:
            raise self.fail_connect
        self._connected = True

    async def join(self, channel: str) -> None:
        if self.fail_join:
            raise self.fail_join
        self.joins.append(channel)

    async def send(self, channel: str, text: str) -> None:
        if self.fail_send:
            raise self.fail_send
        self.sent.append((channel, text))

    def is_connected(self) -> bool:
        return self._connected

    async def disconnect(self) -> None:
        self.disconnects += 1
        self._connected = False

    def drop(self) -> None:
        """Simulate the server closing the link."""
        self._connected = False


class YieldingTransport(FakeTransport):
    """FakeTransport whose connect and join suspend, like a real network round trip."""

    async def connect(self, hostname: str, port: int | None, password: str | None) -> None:
        await asyncio.sleep(0)
        await super().connect(hostname, port, password)

    async def join(self, channel: str) -> None:
        await asyncio.sleep(0)
        await super().join(channel)
