"""Severity-leveled diagnostics emitted by the transport."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class LogSeverity(enum.IntEnum):
    CRITICAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    VERBOSE = 4
    DEBUG = 5


@dataclass(frozen=True)
class LogMessage:
    severity: LogSeverity
    source: str
    message: str
    exception: BaseException | None = None

    def __str__(self) -> str:
        text = f"{self.source}: {self.message}"
        if self.exception is not None and not self.message:
            text = f"{self.source}: {self.exception!r}"
        return text
