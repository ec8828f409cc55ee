"""Log message and IRC session value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class LogMessage:
    """Log message as delivered by the pipeline. Read-only."""

    id: str
    level: int  # 0 (EMERG) .. 7 (DEBUG)
    host: str
    facility: str
    short_message: str
    stream_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogMessage:
        """Build from a GELF-like dict (``_id``/``id``, ``level``, ``host``, ``facility``,
        ``short_message``, ``streams``). Stream entries may be ids or ``{"id": ...}`` dicts."""
        streams = data.get("streams") or data.get("stream_ids") or []
        stream_ids: list[str] = []
        for stream in streams:
            if isinstance(stream, dict):
                sid = stream.get("id")
                if sid:
                    stream_ids.append(str(sid))
            elif stream is not None:
                stream_ids.append(str(stream))

        level = data.get("level", 6)
        if isinstance(level, str) and level.strip().isdigit():
            level = int(level)

        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            level=level,
            host=str(data.get("host") or data.get("source") or ""),
            facility=str(data.get("facility") or ""),
            short_message=str(data.get("short_message") or data.get("message") or ""),
            stream_ids=tuple(stream_ids),
        )


@dataclass(frozen=True)
class IRCChannelMessage:
    """One formatted line bound for one channel."""

    channel: str
    text: str


class SessionState(Enum):
    """IRC session lifecycle. One-way within a session."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
