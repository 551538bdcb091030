"""Relay transport diagnostics into the process log."""

from __future__ import annotations

import logging

from ..services.logs import TRACE
from ..transport.log_message import LogMessage, LogSeverity

logger = logging.getLogger("slashbot.transport")

SEVERITY_LEVELS: dict[LogSeverity, int] = {
    LogSeverity.CRITICAL: logging.CRITICAL,
    LogSeverity.ERROR: logging.ERROR,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.INFO: logging.INFO,
    LogSeverity.DEBUG: logging.DEBUG,
    LogSeverity.VERBOSE: TRACE,
}


def relay_transport_log(message: LogMessage) -> None:
    level = SEVERITY_LEVELS.get(message.severity)
    if level is None:
        return
    exc = message.exception
    logger.log(
        level,
        "%s",
        message,
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
    )
