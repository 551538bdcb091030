"""Write-once command registry.

The registry starts ``UNREGISTERED``.  :meth:`CommandRegistry.bind` builds
the name -> command table from the catalog in one step, and
:meth:`CommandRegistry.complete` moves it to ``REGISTERED`` once the
registration fan-out has been attempted.  Neither step can be repeated.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from ...transport.models import CommandDefinition

if TYPE_CHECKING:
    from .base import SlashCommand


class RegistryState(enum.Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


class DuplicateCommandError(RuntimeError):
    """Two catalog entries share a command name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate slash command name '{name}' in catalog")


class CommandRegistry:

    def __init__(self) -> None:
        self._table: Mapping[str, SlashCommand] = MappingProxyType({})
        self._definitions: tuple[CommandDefinition, ...] = ()
        self._bound = False
        self._state = RegistryState.UNREGISTERED

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def bound(self) -> bool:
        return self._bound

    @property
    def definitions(self) -> tuple[CommandDefinition, ...]:
        """Definitions in catalog order."""
        return self._definitions

    def bind(self, catalog: Iterable[SlashCommand]) -> list[tuple[CommandDefinition, SlashCommand]]:
        """Build the table from *catalog* and return ``(definition, command)`` pairs.

        Raises :class:`DuplicateCommandError` before anything is installed
        if two commands share a name.
        """
        if self._bound:
            raise RuntimeError("Command registry is already bound")
        table: dict[str, SlashCommand] = {}
        entries: list[tuple[CommandDefinition, SlashCommand]] = []
        for command in catalog:
            definition = command.definition()
            if definition.name in table:
                raise DuplicateCommandError(definition.name)
            table[definition.name] = command
            entries.append((definition, command))
        self._table = MappingProxyType(table)
        self._definitions = tuple(d for d, _ in entries)
        self._bound = True
        return entries

    def complete(self) -> None:
        if not self._bound:
            raise RuntimeError("Command registry must be bound before it is completed")
        self._state = RegistryState.REGISTERED

    def get(self, name: str) -> SlashCommand | None:
        return self._table.get(name)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._table)

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)
