"""Discord transport -- REST client, gateway client and wire-level types."""

from .errors import (
    DiscordHTTPError,
    GatewayError,
    LoginFailedError,
    ResponderUsedError,
    TransportError,
)
from .gateway import DiscordClient
from .log_message import LogMessage, LogSeverity
from .models import (
    CommandDefinition,
    CommandOption,
    Guild,
    Invocation,
    OptionType,
    OptionValue,
    Responder,
)
from .responder import InteractionResponder
from .rest import DiscordRestClient

__all__ = [
    "CommandDefinition",
    "CommandOption",
    "DiscordClient",
    "DiscordHTTPError",
    "DiscordRestClient",
    "GatewayError",
    "Guild",
    "InteractionResponder",
    "Invocation",
    "LogMessage",
    "LogSeverity",
    "LoginFailedError",
    "OptionType",
    "OptionValue",
    "Responder",
    "ResponderUsedError",
    "TransportError",
]
