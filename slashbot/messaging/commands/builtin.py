"""Built-in slash commands."""

from __future__ import annotations

from ...transport.models import CommandDefinition, CommandOption, Invocation, OptionType
from .base import SlashCommand

SOURCE_CODE_URL = "https://github.com/markekraus/DiscordSlashCommandBot"


class EchoCommand:
    """``/echo message:<text>`` -- replies with *text*."""

    NAME = "echo"
    OPTION_MESSAGE = "message"

    def definition(self) -> CommandDefinition:
        return CommandDefinition(
            name=self.NAME,
            description="Echos back whatever message is provided.",
            options=(
                CommandOption(
                    name=self.OPTION_MESSAGE,
                    type=OptionType.STRING,
                    description="The message to be echoed",
                    required=True,
                ),
            ),
        )

    async def handle(self, invocation: Invocation) -> None:
        value = invocation.option(self.OPTION_MESSAGE)
        if value is None:
            raise ValueError(f"/{self.NAME} invoked without the '{self.OPTION_MESSAGE}' option")
        await invocation.responder.respond(str(value))


class SourceCodeCommand:
    """``/source-code`` -- replies with the bot's repository URL."""

    NAME = "source-code"

    def definition(self) -> CommandDefinition:
        return CommandDefinition(
            name=self.NAME,
            description="Provides a link to the bot's source code.",
        )

    async def handle(self, invocation: Invocation) -> None:
        await invocation.responder.respond(SOURCE_CODE_URL)


def build_catalog() -> tuple[SlashCommand, ...]:
    """Return the commands the bot serves, in registration order."""
    return (EchoCommand(), SourceCodeCommand())
