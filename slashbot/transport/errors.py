"""Transport exception hierarchy."""

from __future__ import annotations


class TransportError(Exception):
    """Base class for failures talking to Discord."""


class DiscordHTTPError(TransportError):
    """Discord answered a REST call with a non-2xx status."""

    def __init__(self, status: int, message: str = "", code: int = 0) -> None:
        self.status = status
        self.code = code
        self.message = message
        detail = f" (code {code})" if code else ""
        super().__init__(f"HTTP {status}{detail}: {message or 'no message'}")


class LoginFailedError(TransportError):
    """The bot token was rejected."""


class GatewayError(TransportError):
    """The gateway connection could not be established or was lost."""


class ResponderUsedError(RuntimeError):
    """An invocation was answered more than once."""
