"""Slash-command dispatcher.

Owns the command registry, registers every catalog command against every
configured guild when the transport becomes ready, and routes each
incoming invocation to the command that owns its name.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from ...transport.errors import TransportError
from ...transport.models import CommandDefinition, Guild, Invocation
from ..event_ids import EventIds
from .base import SlashCommand
from .registry import CommandRegistry

logger = logging.getLogger(__name__)


class CommandTransport(Protocol):
    def get_guild(self, guild_id: int) -> Guild | None: ...

    async def register_command(self, guild_id: int, definition: CommandDefinition) -> Any: ...


class CommandDispatcher:

    def __init__(
        self,
        catalog: Sequence[SlashCommand],
        transport: CommandTransport,
        guild_ids: Sequence[int],
        *,
        registry: CommandRegistry | None = None,
        unknown_command_reply: str = "",
    ) -> None:
        self._catalog = tuple(catalog)
        self._transport = transport
        self._guild_ids = tuple(guild_ids)
        self.registry = registry or CommandRegistry()
        self.unknown_command_reply = unknown_command_reply

    # -- Registration ---------------------------------------------------------

    async def on_ready(self) -> None:
        if self.registry.bound:
            logger.warning(
                "[%d] Transport signalled ready again; keeping the existing "
                "%d registered command(s)",
                EventIds.REGISTRATION_ALREADY_COMPLETE.id,
                len(self.registry),
                extra=EventIds.REGISTRATION_ALREADY_COMPLETE.extra(),
            )
            return

        entries = self.registry.bind(self._catalog)
        succeeded = failed = 0
        for definition, _command in entries:
            for guild_id in self._guild_ids:
                if await self._register(definition, guild_id):
                    succeeded += 1
                else:
                    failed += 1
        self.registry.complete()
        logger.info(
            "Slash command registration finished: %d command(s), %d guild(s), "
            "%d registered, %d failed",
            len(entries), len(self._guild_ids), succeeded, failed,
        )

    async def _register(self, definition: CommandDefinition, guild_id: int) -> bool:
        guild = self._transport.get_guild(guild_id)
        guild_name = guild.name if guild is not None else "<unavailable>"
        if guild is None:
            logger.error(
                "[%d] Failed to register '%s' to guildId '%s' guildName '%s': "
                "guild is not available to the bot.",
                EventIds.FAILED_SLASH_COMMAND_REGISTRATION.id,
                definition.name, guild_id, guild_name,
                extra=EventIds.FAILED_SLASH_COMMAND_REGISTRATION.extra(),
            )
            return False
        try:
            await self._transport.register_command(guild_id, definition)
        except TransportError as exc:
            logger.error(
                "[%d] Failed to register '%s' to guildId '%s' guildName '%s': %s",
                EventIds.FAILED_SLASH_COMMAND_REGISTRATION.id,
                definition.name, guild_id, guild_name, exc,
                exc_info=True,
                extra=EventIds.FAILED_SLASH_COMMAND_REGISTRATION.extra(),
            )
            return False
        logger.info(
            "Registered '%s' to guildId '%s' guildName '%s'.",
            definition.name, guild_id, guild_name,
        )
        return True

    # -- Routing --------------------------------------------------------------

    async def dispatch(self, invocation: Invocation) -> bool:
        """Route *invocation* to its command; ``False`` if nothing matched."""
        command = self.registry.get(invocation.command_name)
        if command is None:
            logger.warning(
                "[%d] Unable to find slash command handler for slash command '%s'",
                EventIds.SLASH_COMMAND_NOT_FOUND.id,
                invocation.command_name,
                extra=EventIds.SLASH_COMMAND_NOT_FOUND.extra(),
            )
            if self.unknown_command_reply:
                await self._reply_unknown(invocation)
            return False

        logger.info(
            "Processing slash command '%s' from user '%s' in channel '%s'.",
            invocation.command_name, invocation.user_id, invocation.channel_id,
        )
        await command.handle(invocation)
        return True

    async def _reply_unknown(self, invocation: Invocation) -> None:
        try:
            await invocation.responder.respond(self.unknown_command_reply)
        except TransportError as exc:
            logger.warning(
                "Could not send unknown-command reply for '%s': %s",
                invocation.command_name, exc,
            )
