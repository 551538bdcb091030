"""Tests for the built-in /echo and /source-code commands."""

from __future__ import annotations

import pytest

from slashbot.messaging.commands import SOURCE_CODE_URL, EchoCommand, SourceCodeCommand
from slashbot.tests.helpers import make_invocation
from slashbot.transport.models import OptionType


class TestEchoCommand:
    def test_definition(self) -> None:
        d = EchoCommand().definition()
        assert d.name == "echo"
        assert d.description == "Echos back whatever message is provided."
        (opt,) = d.options
        assert (opt.name, opt.type, opt.required) == ("message", OptionType.STRING, True)

    async def test_replies_with_message(self) -> None:
        inv = make_invocation("echo", {"message": "hi"})
        await EchoCommand().handle(inv)
        inv.responder.respond.assert_awaited_once_with("hi")

    async def test_non_string_value_stringified(self) -> None:
        inv = make_invocation("echo", {"message": 42})
        await EchoCommand().handle(inv)
        inv.responder.respond.assert_awaited_once_with("42")

    async def test_missing_option_raises_without_reply(self) -> None:
        inv = make_invocation("echo")
        with pytest.raises(ValueError, match="message"):
            await EchoCommand().handle(inv)
        inv.responder.respond.assert_not_awaited()


class TestSourceCodeCommand:
    def test_definition_has_no_options(self) -> None:
        d = SourceCodeCommand().definition()
        assert d.name == "source-code"
        assert d.options == ()

    async def test_replies_with_url(self) -> None:
        inv = make_invocation("source-code")
        await SourceCodeCommand().handle(inv)
        inv.responder.respond.assert_awaited_once_with(SOURCE_CODE_URL)

    async def test_options_ignored(self) -> None:
        inv = make_invocation("source-code", {"anything": "else"})
        await SourceCodeCommand().handle(inv)
        inv.responder.respond.assert_awaited_once_with(
            "https://github.com/markekraus/DiscordSlashCommandBot",
        )
