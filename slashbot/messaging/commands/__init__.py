"""Slash-command catalog, registry and dispatcher.

- ``base``      -- the ``SlashCommand`` protocol
- ``builtin``   -- ``/echo`` and ``/source-code``
- ``registry``  -- write-once name -> command table
"""

from ._dispatcher import CommandDispatcher, CommandTransport
from .base import SlashCommand
from .builtin import SOURCE_CODE_URL, EchoCommand, SourceCodeCommand, build_catalog
from .registry import CommandRegistry, DuplicateCommandError, RegistryState

__all__ = [
    "SOURCE_CODE_URL",
    "CommandDispatcher",
    "CommandRegistry",
    "CommandTransport",
    "DuplicateCommandError",
    "EchoCommand",
    "RegistryState",
    "SlashCommand",
    "SourceCodeCommand",
    "build_catalog",
]
