"""Test helpers shared across modules."""

from __future__ import annotations

from unittest.mock import AsyncMock

from slashbot.transport.models import Invocation, OptionValue


def make_invocation(
    name: str,
    options: dict[str, object] | None = None,
    *,
    user_id: int = 111,
    channel_id: int = 222,
) -> Invocation:
    return Invocation(
        command_name=name,
        options=tuple(OptionValue(k, v) for k, v in (options or {}).items()),
        responder=AsyncMock(),
        user_id=user_id,
        channel_id=channel_id,
        guild_id=333,
        interaction_id="999",
    )
