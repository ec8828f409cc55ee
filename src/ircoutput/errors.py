"""Output adapter exceptions."""

from __future__ import annotations


class OutputError(Exception):
    """Base for output adapter errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(OutputError):
    """Adapter configuration invalid or adapter not initialized."""


class MissingRequiredField(ConfigurationError):
    """A required configuration key is absent or empty."""


class InvalidFieldFormat(ConfigurationError):
    """A configuration value cannot be parsed."""


class InvalidSeverity(OutputError):
    """Message severity level outside 0..7."""


class TransportError(OutputError):
    """IRC transport failure during write."""


class IRCConnectionError(TransportError):
    """Could not establish the IRC session."""


class JoinError(TransportError):
    """Could not join an IRC channel."""


class SendError(TransportError):
    """Could not deliver a line to an IRC channel."""
