"""Render a log message as one severity-colored IRC line."""

from __future__ import annotations

import re

from ircoutput.config.validator import AdapterConfig
from ircoutput.errors import InvalidSeverity
from ircoutput.models import LogMessage

# IRC control code: \x03<fg>,<bg>
COLOR = "\x03"

RED = f"{COLOR}04,1"
YELLOW = f"{COLOR}08,1"
CYAN = f"{COLOR}11,1"
TEAL = f"{COLOR}10,1"
WHITE = f"{COLOR}00,1"

# Indexed by syslog severity, 0 (most severe) .. 7
LEVELS: tuple[str, ...] = ("EMERG", "ALERT", "CRIT", "ERROR", "WARN", "NOTICE", "INFO", "DEBUG")
COLORS: tuple[str, ...] = (RED, RED, RED, RED, YELLOW, CYAN, TEAL, WHITE)

_LINE_BREAKS = re.compile(r"[\r\n]+")


def _one_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text)


def short_host(host: str) -> str:
    """Hostname only: 'web01.example.com' -> 'web01'."""
    return host.split(".", 1)[0]


def message_link(config: AdapterConfig, message: LogMessage) -> str:
    """Web interface link with trailing space, or '' when no web hostname is configured."""
    if not config.web_link_hostname:
        return ""
    return f"http://{config.web_link_hostname}/messages/{message.id} "


def severity(level: object) -> tuple[str, str]:
    """(label, color) for a severity level; InvalidSeverity outside 0..7."""
    if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level < len(LEVELS):
        raise InvalidSeverity(
            f"Invalid severity level: {level!r}",
            code="invalid_severity",
            details={"level": level},
        )
    return LEVELS[level], COLORS[level]


def format_message(message: LogMessage, config: AdapterConfig) -> str:
    """Format message as '<color><link><LEVEL > [<host>: <facility>] <text>'."""
    label, color = severity(message.level)
    return _one_line(
        f"{color}{message_link(config, message)}{label:<6.6} "
        f"[{short_host(message.host)}: {message.facility}] {message.short_message}"
    )
