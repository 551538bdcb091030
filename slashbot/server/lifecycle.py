"""Bot service -- wires the Discord client to the command dispatcher."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..config.settings import Settings
from ..messaging.commands import CommandDispatcher, SlashCommand, build_catalog
from ..messaging.log_relay import relay_transport_log
from ..transport.gateway import DiscordClient
from ..transport.rest import DiscordRestClient

logger = logging.getLogger(__name__)


class BotService:

    def __init__(
        self,
        settings: Settings,
        client: DiscordClient | None = None,
        catalog: Sequence[SlashCommand] | None = None,
    ) -> None:
        self._settings = settings
        self.client = client or DiscordClient(DiscordRestClient(settings.api_base))
        self.dispatcher = CommandDispatcher(
            build_catalog() if catalog is None else catalog,
            self.client,
            settings.guild_ids,
            unknown_command_reply=settings.unknown_command_reply,
        )
        self.client.on_log.append(relay_transport_log)
        self.client.on_ready.append(self.dispatcher.on_ready)
        self.client.on_slash_command.append(self.dispatcher.dispatch)

    async def start(self) -> None:
        s = self._settings
        logger.info("Starting bot service.")
        logger.info("LogLevel: %s", s.log_level)
        logger.info("DiscordBotToken Found: %s", s.token_found)
        if not s.guild_ids:
            logger.warning("No guild ids configured; slash commands will not be registered")
        await self.client.login(s.token)
        await self.client.start()

    async def run(self, stop: asyncio.Event) -> None:
        """Start, then serve until *stop* is set or the gateway fails fatally.

        The client is stopped on every exit path, including a failed login.
        """
        try:
            await self.start()
            await self._wait(stop)
        finally:
            await self.stop()

    async def _wait(self, stop: asyncio.Event) -> None:
        waiter = asyncio.create_task(stop.wait())
        closed = asyncio.create_task(self.client.wait_closed())
        try:
            done, _ = await asyncio.wait({waiter, closed}, return_when=asyncio.FIRST_COMPLETED)
            if closed in done:
                closed.result()
        finally:
            for task in (waiter, closed):
                if not task.done():
                    task.cancel()

    async def stop(self) -> None:
        logger.info("Stopping bot service")
        await self.client.stop()
