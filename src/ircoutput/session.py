"""Connection manager: the single IRC session behind the output."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from loguru import logger

from ircoutput.config.validator import AdapterConfig
from ircoutput.errors import IRCConnectionError, JoinError, SendError, TransportError
from ircoutput.models import IRCChannelMessage, SessionState
from ircoutput.transport import IRCTransport

VERSION_STRING = "Graylog2 IRC Output plugin version 0.1"
DEFAULT_TIMEOUT = 30.0

T = TypeVar("T")


class ConnectionManager:
    """Lazily connects, joins each channel once, sends lines.

    State is DISCONNECTED -> CONNECTED per session; joined channels only grow.
    One lock guards connect/join/send since the transport is not safe for concurrent use.
    """

    def __init__(
        self,
        config: AdapterConfig,
        transport: IRCTransport,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._config = config
        self._transport = transport
        self._timeout = timeout
        self._state = SessionState.DISCONNECTED
        self._joined: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def joined_channels(self) -> frozenset[str]:
        return frozenset(self._joined)

    @property
    def connected(self) -> bool:
        return self._state is SessionState.CONNECTED and self._transport.is_connected()

    async def ensure_connected(self) -> None:
        """Connect if there is no live session. Raises IRCConnectionError."""
        async with self._lock:
            if self.connected:
                return
            if self._state is SessionState.CONNECTED:
                logger.warning("IRC session to {} dropped; starting a new session", self._config.hostname)
                self._state = SessionState.DISCONNECTED
            self._joined.clear()

            self._transport.set_identity(self._config.nickname, self._config.nickname, VERSION_STRING)
            logger.info(
                "Connecting to IRC {}:{} as {}",
                self._config.hostname,
                self._config.port or "default",
                self._config.nickname,
            )
            await self._call(
                self._transport.connect(self._config.hostname, self._config.port, self._config.password),
                IRCConnectionError,
                f"Could not connect to {self._config.hostname}",
                code="connect_failed",
                details={"hostname": self._config.hostname, "port": self._config.port},
            )
            self._state = SessionState.CONNECTED

    async def ensure_joined(self, channel: str) -> None:
        """Join channel unless already joined this session. Raises JoinError."""
        async with self._lock:
            if channel in self._joined:
                return
            if self._state is not SessionState.CONNECTED:
                raise JoinError(f"Cannot join {channel}: not connected", code="not_connected")
            await self._call(
                self._transport.join(channel),
                JoinError,
                f"Could not join {channel}",
                code="join_failed",
                details={"channel": channel},
            )
            self._joined.add(channel)
            logger.info("Joined {}", channel)

    async def send(self, line: IRCChannelMessage) -> None:
        """Deliver line to its (already joined) channel. Raises SendError."""
        async with self._lock:
            if line.channel not in self._joined:
                raise SendError(
                    f"Cannot send to {line.channel}: channel not joined",
                    code="not_joined",
                    details={"channel": line.channel},
                )
            await self._call(
                self._transport.send(line.channel, line.text),
                SendError,
                f"Could not send to {line.channel}",
                code="send_failed",
                details={"channel": line.channel},
            )
            logger.debug("Sent to {}: {}", line.channel, line.text)

    async def close(self) -> None:
        """Disconnect and forget the session."""
        async with self._lock:
            try:
                if self._state is SessionState.CONNECTED:
                    await asyncio.wait_for(self._transport.disconnect(), self._timeout)
                    logger.info("Disconnected from IRC {}", self._config.hostname)
            finally:
                self._state = SessionState.DISCONNECTED
                self._joined.clear()

    async def _call(
        self,
        op: Awaitable[T],
        error: type[TransportError],
        message: str,
        *,
        code: str,
        details: dict[str, object],
    ) -> T:
        """Await a transport call under the timeout; wrap failures in error."""
        try:
            return await asyncio.wait_for(op, self._timeout)
        except asyncio.TimeoutError as exc:
            raise error(
                f"{message}: timed out after {self._timeout:g}s",
                code="timeout",
                details=details,
                original_error=exc,
            ) from exc
        except TransportError:
            raise
        except Exception as exc:
            raise error(f"{message}: {exc}", code=code, details=details, original_error=exc) from exc
