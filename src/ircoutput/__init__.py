"""IRC output adapter: relays log messages into IRC channels."""

from ircoutput.errors import (
    ConfigurationError,
    InvalidFieldFormat,
    InvalidSeverity,
    IRCConnectionError,
    JoinError,
    MissingRequiredField,
    OutputError,
    SendError,
    TransportError,
)
from ircoutput.models import LogMessage
from ircoutput.output import IRCOutput

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "IRCConnectionError",
    "IRCOutput",
    "InvalidFieldFormat",
    "InvalidSeverity",
    "JoinError",
    "LogMessage",
    "MissingRequiredField",
    "OutputError",
    "SendError",
    "TransportError",
    "__version__",
]
