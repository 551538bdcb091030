"""Value types exchanged between the transport and the command layer."""

from __future__ import annotations

import enum
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

_NAME_RE = re.compile(r"[-_\w]{1,32}")
MAX_DESCRIPTION_LENGTH = 100


class OptionType(enum.IntEnum):
    """Discord application-command option types."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


def _check_name(kind: str, name: str) -> None:
    if not _NAME_RE.fullmatch(name) or name != name.lower():
        raise ValueError(
            f"{kind} name {name!r} must be 1-32 lowercase letters, digits, '-' or '_'"
        )


def _check_description(kind: str, name: str, description: str) -> None:
    if not 1 <= len(description) <= MAX_DESCRIPTION_LENGTH:
        raise ValueError(
            f"{kind} {name!r} description must be 1-{MAX_DESCRIPTION_LENGTH} characters"
        )


@dataclass(frozen=True)
class CommandOption:
    name: str
    type: OptionType
    description: str
    required: bool = False

    def __post_init__(self) -> None:
        _check_name("Option", self.name)
        _check_description("Option", self.name, self.description)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": int(self.type),
            "description": self.description,
            "required": self.required,
        }


@dataclass(frozen=True)
class CommandDefinition:
    """Externally registered schema of one slash command."""

    name: str
    description: str
    options: tuple[CommandOption, ...] = ()

    def __post_init__(self) -> None:
        _check_name("Command", self.name)
        _check_description("Command", self.name, self.description)
        # Accept any sequence but store it immutably.
        object.__setattr__(self, "options", tuple(self.options))

    def to_payload(self) -> dict[str, Any]:
        """Return the body of a guild application-command create request."""
        return {
            "name": self.name,
            "type": 1,
            "description": self.description,
            "options": [o.to_payload() for o in self.options],
        }


@dataclass(frozen=True)
class OptionValue:
    name: str
    value: Any
    type: OptionType = OptionType.STRING


class Responder(Protocol):
    async def respond(self, text: str) -> None: ...


@dataclass(frozen=True)
class Invocation:
    """One remote request to execute a slash command."""

    command_name: str
    options: tuple[OptionValue, ...]
    responder: Responder
    user_id: int
    channel_id: int
    guild_id: int | None = None
    interaction_id: str = ""

    def option(self, name: str, default: Any = None) -> Any:
        for opt in self.options:
            if opt.name == name:
                return opt.value
        return default


@dataclass
class Guild:
    id: int
    name: str
    extra: dict[str, Any] = field(default_factory=dict, repr=False)


def parse_option_values(raw: Sequence[dict[str, Any]] | None) -> tuple[OptionValue, ...]:
    values: list[OptionValue] = []
    for item in raw or ():
        try:
            opt_type = OptionType(item.get("type", OptionType.STRING))
        except ValueError:
            opt_type = OptionType.STRING
        values.append(OptionValue(name=item["name"], value=item.get("value"), type=opt_type))
    return tuple(values)
