"""Stable identifiers attached to notable log events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EventId:
    id: int
    name: str

    def extra(self) -> dict[str, Any]:
        """Return ``logging`` *extra* fields identifying this event."""
        return {"event_id": self.id, "event_name": self.name}


class EventIds:
    FAILED_SLASH_COMMAND_REGISTRATION = EventId(10001, "Slash Command failed to register.")
    SLASH_COMMAND_NOT_FOUND = EventId(10002, "No slash command was found to handle slash command event.")
    REGISTRATION_ALREADY_COMPLETE = EventId(10003, "Slash commands were already registered for this process.")
