"""The capability every slash command implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...transport.models import CommandDefinition, Invocation


@runtime_checkable
class SlashCommand(Protocol):
    def definition(self) -> CommandDefinition:
        """Return the schema registered with Discord."""
        ...

    async def handle(self, invocation: Invocation) -> None:
        """Send exactly one reply through ``invocation.responder``."""
        ...
