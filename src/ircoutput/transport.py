"""IRC transport port and its pydle implementation."""

from __future__ import annotations

import asyncio
from typing import Protocol

import pydle
from loguru import logger

DEFAULT_PORT = 6667
DEFAULT_TLS_PORT = 6697


class IRCTransport(Protocol):
    """What the session needs from an IRC client. Framing, PING/PONG and TLS live behind it."""

    def set_identity(self, nickname: str, login: str, version: str) -> None: ...

    async def connect(self, hostname: str, port: int | None, password: str | None) -> None: ...

    async def join(self, channel: str) -> None: ...

    async def send(self, channel: str, text: str) -> None: ...

    def is_connected(self) -> bool: ...

    async def disconnect(self) -> None: ...


class OutputClient(pydle.Client):
    """Pydle client that reports registration and answers CTCP VERSION."""

    # Reconnects are owned by ConnectionManager, never by pydle itself.
    RECONNECT_ON_ERROR = False

    def __init__(self, nickname: str, *, username: str, version: str, **kwargs):
        super().__init__(nickname, username=username, realname=version, **kwargs)
        self._version = version
        self._registered = asyncio.Event()

    @property
    def is_registered(self) -> bool:
        return self._registered.is_set()

    async def wait_registered(self) -> None:
        await self._registered.wait()

    async def on_connect(self):
        """Registration complete (RPL_WELCOME)."""
        await super().on_connect()
        self._registered.set()
        logger.info("IRC registered as {}", self.nickname)

    async def on_disconnect(self, expected: bool) -> None:
        await super().on_disconnect(expected)
        self._registered.clear()
        if not expected:
            logger.warning("IRC connection lost")

    async def on_ctcp_version(self, by, target, contents):
        await self.ctcp_reply(by, "VERSION", self._version)


class PydleTransport:
    """IRCTransport backed by a pydle client; a fresh client per connect."""

    def __init__(self, *, tls: bool = False, tls_verify: bool = True) -> None:
        self._tls = tls
        self._tls_verify = tls_verify
        self._nickname = "graylog2"
        self._login = "graylog2"
        self._version = ""
        self._client: OutputClient | None = None

    def set_identity(self, nickname: str, login: str, version: str) -> None:
        self._nickname = nickname
        self._login = login
        self._version = version

    async def connect(self, hostname: str, port: int | None, password: str | None) -> None:
        if self._client is not None:
            stale, self._client = self._client, None
            await stale.disconnect(expected=True)
        self._client = OutputClient(self._nickname, username=self._login, version=self._version)
        await self._client.connect(
            hostname=hostname,
            port=port or (DEFAULT_TLS_PORT if self._tls else DEFAULT_PORT),
            password=password,
            tls=self._tls,
            tls_verify=self._tls_verify,
        )
        await self._client.wait_registered()

    async def join(self, channel: str) -> None:
        await self._require_client().join(channel)

    async def send(self, channel: str, text: str) -> None:
        await self._require_client().message(channel, text)

    def is_connected(self) -> bool:
        return bool(self._client is not None and self._client.connected and self._client.is_registered)

    async def disconnect(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.disconnect(expected=True)

    def _require_client(self) -> OutputClient:
        if self._client is None:
            raise RuntimeError("IRC transport not connected")
        return self._client
