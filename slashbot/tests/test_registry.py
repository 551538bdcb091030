"""Tests for the write-once command registry."""

from __future__ import annotations

import pytest

from slashbot.messaging.commands import (
    CommandRegistry,
    DuplicateCommandError,
    EchoCommand,
    RegistryState,
    SourceCodeCommand,
    build_catalog,
)
from slashbot.transport.models import CommandDefinition


class _Named:
    def __init__(self, name: str) -> None:
        self._name = name

    def definition(self) -> CommandDefinition:
        return CommandDefinition(self._name, f"{self._name} command")

    async def handle(self, invocation) -> None:
        await invocation.responder.respond(self._name)


class TestBind:
    def test_table_matches_catalog(self) -> None:
        catalog = [_Named("a"), _Named("b"), _Named("c")]
        registry = CommandRegistry()
        entries = registry.bind(catalog)

        assert len(registry) == len(catalog)
        assert registry.names == {"a", "b", "c"}
        assert [d.name for d, _ in entries] == ["a", "b", "c"]
        assert [d.name for d in registry.definitions] == ["a", "b", "c"]
        assert registry.get("b") is catalog[1]

    def test_duplicate_name_is_fatal(self) -> None:
        registry = CommandRegistry()
        with pytest.raises(DuplicateCommandError) as err:
            registry.bind([_Named("a"), _Named("b"), _Named("a")])
        assert err.value.name == "a"
        assert not registry.bound
        assert len(registry) == 0
        assert registry.get("b") is None

    def test_bind_twice_rejected(self) -> None:
        registry = CommandRegistry()
        registry.bind([_Named("a")])
        with pytest.raises(RuntimeError):
            registry.bind([_Named("b")])
        assert registry.names == {"a"}

    def test_empty_catalog(self) -> None:
        registry = CommandRegistry()
        registry.bind([])
        assert registry.bound
        assert len(registry) == 0


class TestState:
    def test_starts_unregistered(self) -> None:
        registry = CommandRegistry()
        assert registry.state is RegistryState.UNREGISTERED
        assert "echo" not in registry

    def test_complete_requires_bind(self) -> None:
        with pytest.raises(RuntimeError):
            CommandRegistry().complete()

    def test_complete_transitions(self) -> None:
        registry = CommandRegistry()
        registry.bind(build_catalog())
        assert registry.state is RegistryState.UNREGISTERED
        registry.complete()
        assert registry.state is RegistryState.REGISTERED

    def test_table_is_read_only(self) -> None:
        registry = CommandRegistry()
        registry.bind([_Named("a")])
        with pytest.raises(TypeError):
            registry._table["b"] = _Named("b")  # type: ignore[index]


class TestCatalog:
    def test_builtin_catalog_order(self) -> None:
        catalog = build_catalog()
        assert [type(c) for c in catalog] == [EchoCommand, SourceCodeCommand]
        assert [c.definition().name for c in catalog] == ["echo", "source-code"]

    def test_builtin_names_unique(self) -> None:
        registry = CommandRegistry()
        registry.bind(build_catalog())
        assert registry.names == {"echo", "source-code"}
