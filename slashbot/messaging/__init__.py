"""Slash-command handling -- catalog, dispatcher and transport log relay."""

from .event_ids import EventId, EventIds
from .log_relay import relay_transport_log

__all__ = [
    "EventId",
    "EventIds",
    "relay_transport_log",
]
