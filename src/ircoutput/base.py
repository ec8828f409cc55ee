"""Host contract for message outputs (initialize, write, config schema, name)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from ircoutput.models import LogMessage
from ircoutput.routing import StreamChannelConfig


class MessageOutput(ABC):
    """Interface the host drives. The host picks the implementation and supplies config maps."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name shown by the host."""
        ...

    @abstractmethod
    def initialize(self, configuration: Mapping[str, str] | None) -> None:
        """Validate and store output configuration. Raise ConfigurationError."""
        ...

    @abstractmethod
    async def write(
        self,
        messages: Sequence[LogMessage],
        stream_configuration: StreamChannelConfig | None,
        server: Any = None,
    ) -> None:
        """Deliver a batch of messages."""
        ...

    @abstractmethod
    def requested_configuration(self) -> dict[str, str]:
        """Output-level fields: key -> label for the host configuration UI."""
        ...

    @abstractmethod
    def requested_stream_configuration(self) -> dict[str, str]:
        """Per-stream fields: key -> label for the host configuration UI."""
        ...

    async def stop(self) -> None:
        """Release resources. Override when the output holds connections."""
        pass
