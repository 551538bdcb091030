"""Minimal Discord REST client on top of ``aiohttp``."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from .. import __version__
from .errors import DiscordHTTPError, LoginFailedError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://discord.com/api/v10"
USER_AGENT = f"DiscordBot (https://github.com/markekraus/DiscordSlashCommandBot, {__version__})"

# Interaction callback type: reply with a message in the channel.
CHANNEL_MESSAGE_WITH_SOURCE = 4

# Rate-limit back-off bounds, in seconds.
DEFAULT_RETRY_AFTER = 1.0
MAX_RETRY_AFTER = 60.0


class DiscordRestClient:
    """Authenticated access to the handful of endpoints the bot needs."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = 30.0,
        max_rate_limit_retries: int = 3,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_rate_limit_retries = max_rate_limit_retries
        self._token = ""
        self.application_id: int | None = None
        self.user: dict[str, Any] = {}

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def login(self, token: str) -> None:
        """Validate *token* and learn the bot user and application id."""
        self._token = token
        try:
            self.user = await self.request("GET", "/users/@me")
        except DiscordHTTPError as exc:
            if exc.status == 401:
                self._token = ""
                raise LoginFailedError("Discord rejected the bot token") from exc
            raise
        app = await self.request("GET", "/oauth2/applications/@me")
        self.application_id = int(app["id"])
        logger.debug(
            "Logged in as %s (user id %s, application id %s)",
            self.user.get("username", "?"), self.user.get("id", "?"), self.application_id,
        )

    async def get_gateway_url(self) -> str:
        data = await self.request("GET", "/gateway/bot")
        return data["url"]

    async def create_guild_command(
        self, application_id: int, guild_id: int, payload: dict[str, Any],
    ) -> dict[str, Any]:
        return await self.request(
            "POST",
            f"/applications/{application_id}/guilds/{guild_id}/commands",
            json=payload,
        )

    async def create_interaction_response(
        self, interaction_id: str, interaction_token: str, text: str,
    ) -> None:
        await self.request(
            "POST",
            f"/interactions/{interaction_id}/{interaction_token}/callback",
            json={"type": CHANNEL_MESSAGE_WITH_SOURCE, "data": {"content": text}},
            auth=False,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        auth: bool = True,
    ) -> Any:
        """Send one API request, waiting out up to ``max_rate_limit_retries`` 429s."""
        headers = {"User-Agent": USER_AGENT}
        if auth:
            if not self._token:
                raise TransportError("Not logged in")
            headers["Authorization"] = f"Bot {self._token}"
        url = f"{self.api_base}{path}"
        attempt = 0
        while True:
            try:
                async with self.session.request(method, url, json=json, headers=headers) as resp:
                    if resp.status == 204:
                        return None
                    if resp.content_type == "application/json":
                        data = await resp.json()
                    else:
                        data = await resp.text()
                    if resp.status == 429 and attempt < self.max_rate_limit_retries:
                        delay = _retry_after(resp.headers, data)
                    elif resp.status >= 400:
                        message, code = _error_detail(data)
                        raise DiscordHTTPError(resp.status, message, code)
                    else:
                        return data
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                raise TransportError(f"{method} {path} failed: {exc}") from exc
            attempt += 1
            logger.warning(
                "Rate limited on %s %s; retrying in %.2fs (attempt %d of %d)",
                method, path, delay, attempt, self.max_rate_limit_retries,
            )
            await asyncio.sleep(delay)


def _retry_after(headers: Mapping[str, str], data: Any) -> float:
    raw: Any = None
    if isinstance(data, dict):
        raw = data.get("retry_after")
    if raw is None:
        raw = headers.get("Retry-After")
    try:
        delay = float(raw)
    except (TypeError, ValueError):
        delay = DEFAULT_RETRY_AFTER
    return min(max(delay, 0.0), MAX_RETRY_AFTER)


def _error_detail(data: Any) -> tuple[str, int]:
    if isinstance(data, dict):
        return str(data.get("message", "")), int(data.get("code", 0) or 0)
    return str(data)[:200], 0
