"""Logging setup for the bot process."""

from __future__ import annotations

import logging
import time

TRACE = 5

LOG_FORMAT = "%(asctime)s  %(name)s  %(levelname)s  %(message)s"
DATE_FORMAT = "[%Y-%m-%d-%H:%M:%S]"

_NOISY_LOGGERS = (
    "aiohttp.access",
    "aiohttp.client",
    "aiohttp.internal",
    "aiohttp.websocket",
)

logging.addLevelName(TRACE, "TRACE")


def configure_logging(level: int) -> None:
    """Install a UTC-stamped console handler on the root logger at *level*."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=True)
    for handler in logging.getLogger().handlers:
        if handler.formatter is not None:
            handler.formatter.converter = time.gmtime
    _quiet_noisy_loggers()


def _quiet_noisy_loggers() -> None:
    """Suppress verbose aiohttp loggers to WARNING."""
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
