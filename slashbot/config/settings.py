"""Application settings -- reads from ``.env`` file and environment."""

from __future__ import annotations

import logging
import os
from typing import ClassVar

from ..services.logs import TRACE
from ..util.env_file import EnvFile

ENV_PREFIX = "DISCORD_BOT_"

DEFAULT_API_BASE = "https://discord.com/api/v10"

# Severity names accepted for DISCORD_BOT_LOG_LEVEL, mapped to the
# canonical name and the ``logging`` level it selects.
LOG_LEVELS: dict[str, tuple[str, int]] = {
    "trace": ("Trace", TRACE),
    "verbose": ("Trace", TRACE),
    "debug": ("Debug", logging.DEBUG),
    "information": ("Information", logging.INFO),
    "info": ("Information", logging.INFO),
    "warning": ("Warning", logging.WARNING),
    "warn": ("Warning", logging.WARNING),
    "error": ("Error", logging.ERROR),
    "critical": ("Critical", logging.CRITICAL),
    "none": ("None", logging.CRITICAL + 10),
}

DEFAULT_LOG_LEVEL = "Warning"


class Settings:
    """Bot settings read from the ``.env`` file and the process environment.

    A key present in the ``.env`` file wins over the same variable in the
    environment; the environment only fills keys the file leaves unset.
    """

    _DOTENV_ENV: ClassVar[str] = "DOTENV_PATH"

    def __init__(self) -> None:
        self.env = EnvFile(os.getenv(self._DOTENV_ENV) or ".env")
        self.reload()

    def reload(self) -> None:
        e = self._read

        raw_level = e("LOG_LEVEL").strip()
        self.log_level: str
        self.log_level_value: int
        self.log_level, self.log_level_value = LOG_LEVELS.get(
            raw_level.lower(), LOG_LEVELS[DEFAULT_LOG_LEVEL.lower()],
        )
        self._raw_log_level = raw_level

        self.token: str = e("TOKEN").strip()

        raw_guilds = e("GUILD_IDS")
        self._raw_guild_ids: list[str] = [
            g.strip() for g in raw_guilds.split(",") if g.strip()
        ] if raw_guilds else []
        guild_ids: list[int] = []
        for raw in self._raw_guild_ids:
            if raw.isdigit() and int(raw) not in guild_ids:
                guild_ids.append(int(raw))
        self.guild_ids: tuple[int, ...] = tuple(guild_ids)

        self.unknown_command_reply: str = e("UNKNOWN_COMMAND_REPLY")
        self.api_base: str = (e("API_BASE") or DEFAULT_API_BASE).rstrip("/")

    @property
    def token_found(self) -> bool:
        return bool(self.token)

    def _read(self, key: str) -> str:
        name = ENV_PREFIX + key
        return self.env.read(name) or os.getenv(name, "")

    def validate(self) -> None:
        """Raise ``ValueError`` describing the first invalid setting."""
        if not self.token:
            raise ValueError(f"{ENV_PREFIX}TOKEN is not set")
        if self._raw_log_level and self._raw_log_level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"{ENV_PREFIX}LOG_LEVEL '{self._raw_log_level}' is not one of "
                "Trace, Debug, Information, Warning, Error, Critical, None"
            )
        bad = [g for g in self._raw_guild_ids if not g.isdigit()]
        if bad:
            raise ValueError(
                f"{ENV_PREFIX}GUILD_IDS contains non-numeric ids: {', '.join(bad)}"
            )

