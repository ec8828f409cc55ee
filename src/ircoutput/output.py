"""IRC output: routes, formats and sends log messages to IRC channels."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from loguru import logger

from ircoutput.base import MessageOutput
from ircoutput.config.validator import (
    KEY_HOSTNAME,
    KEY_NICKNAME,
    KEY_PASSWORD,
    KEY_PORT,
    KEY_WEB_HOSTNAME,
    AdapterConfig,
    validate_config,
)
from ircoutput.errors import ConfigurationError, InvalidSeverity
from ircoutput.formatting import format_message
from ircoutput.models import IRCChannelMessage, LogMessage
from ircoutput.routing import CHANNEL_KEY, StreamChannelConfig, resolve_channels
from ircoutput.session import DEFAULT_TIMEOUT, ConnectionManager
from ircoutput.transport import IRCTransport, PydleTransport

NAME = "IRC Output"


class IRCOutput(MessageOutput):
    """Message output that relays log messages to IRC.

    One lazy connection per initialize; channels are joined on first use.
    """

    def __init__(
        self,
        transport_factory: Callable[[], IRCTransport] = PydleTransport,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport_factory = transport_factory
        self._timeout = timeout
        self._config: AdapterConfig | None = None
        self._session: ConnectionManager | None = None

    @property
    def name(self) -> str:
        return NAME

    @property
    def config(self) -> AdapterConfig | None:
        return self._config

    @property
    def session(self) -> ConnectionManager | None:
        return self._session

    def initialize(self, configuration: Mapping[str, str] | None) -> None:
        """Validate configuration and build a fresh, unconnected session.

        On failure the adapter is left unusable until initialize succeeds.
        A previous session is not closed here; call stop() first to disconnect it.
        """
        self._config = None
        self._session = None
        config = validate_config(configuration)
        self._config = config
        self._session = ConnectionManager(config, self._transport_factory(), timeout=self._timeout)
        logger.info("IRC output initialized for {}", config.hostname)

    async def reinitialize(self, configuration: Mapping[str, str] | None) -> None:
        """Close the current session, then initialize with new configuration."""
        await self.stop()
        self.initialize(configuration)

    async def write(
        self,
        messages: Sequence[LogMessage],
        stream_configuration: StreamChannelConfig | None,
        server: Any = None,
    ) -> None:
        """Send each message to every channel its streams resolve to.

        A message with an invalid severity is skipped; any transport error aborts the batch.
        """
        if self._config is None or self._session is None:
            raise ConfigurationError("IRC output is not initialized", code="not_initialized")
        config, session = self._config, self._session

        await session.ensure_connected()

        for msg in messages:
            try:
                text = format_message(msg, config)
            except InvalidSeverity as exc:
                logger.warning("Skipping message {}: {}", msg.id, exc)
                continue

            for channel in resolve_channels(msg, stream_configuration):
                await session.ensure_joined(channel)
                await session.send(IRCChannelMessage(channel=channel, text=text))

    def requested_configuration(self) -> dict[str, str]:
        return {
            KEY_HOSTNAME: "Hostname",
            KEY_PORT: "Port",
            KEY_PASSWORD: "Server Password",
            KEY_NICKNAME: "Nickname",
            KEY_WEB_HOSTNAME: "Web Interface External Hostname",
        }

    def requested_stream_configuration(self) -> dict[str, str]:
        return {CHANNEL_KEY: "IRC Channel"}

    async def stop(self) -> None:
        """Disconnect the current session, if any."""
        if self._session is not None:
            await self._session.close()
