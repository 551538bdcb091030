"""Discord gateway client -- lifecycle events, guild cache and interactions.

The client keeps one websocket open to the gateway, sends heartbeats,
tracks the guilds the bot belongs to, and turns ``INTERACTION_CREATE``
dispatches into :class:`Invocation` objects.  Consumers subscribe by
appending callbacks to :attr:`DiscordClient.on_ready`,
:attr:`DiscordClient.on_log` and :attr:`DiscordClient.on_slash_command`.

Slash-command callbacks run in their own task per invocation so one slow
handler never holds up the next event.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import sys
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

import aiohttp

from .errors import GatewayError, TransportError
from .log_message import LogMessage, LogSeverity
from .models import CommandDefinition, Guild, Invocation, parse_option_values
from .responder import InteractionResponder
from .rest import DiscordRestClient

logger = logging.getLogger(__name__)

GATEWAY_VERSION = 10

# Gateway opcodes
OP_DISPATCH = 0
OP_HEARTBEAT = 1
OP_IDENTIFY = 2
OP_RECONNECT = 7
OP_INVALID_SESSION = 9
OP_HELLO = 10
OP_HEARTBEAT_ACK = 11

INTENT_GUILDS = 1 << 0

INTERACTION_APPLICATION_COMMAND = 2

# Close codes after which reconnecting cannot succeed.
FATAL_CLOSE_CODES = frozenset({4004, 4010, 4011, 4012, 4013, 4014})

ReadyCallback = Callable[[], Awaitable[None]]
LogCallback = Callable[[LogMessage], None]
SlashCommandCallback = Callable[[Invocation], Awaitable[None]]


class DiscordClient:

    def __init__(
        self,
        rest: DiscordRestClient | None = None,
        *,
        intents: int = INTENT_GUILDS,
        guild_ready_timeout: float = 2.0,
        reconnect_delay: float = 5.0,
    ) -> None:
        self.rest = rest or DiscordRestClient()
        self.intents = intents
        self.guild_ready_timeout = guild_ready_timeout
        self.reconnect_delay = reconnect_delay

        self.on_ready: list[ReadyCallback] = []
        self.on_log: list[LogCallback] = []
        self.on_slash_command: list[SlashCommandCallback] = []

        self._token = ""
        self._guilds: dict[int, Guild] = {}
        self._pending_guilds: set[int] = set()
        self._awaiting_ready = False
        self._seq: int | None = None
        self._ack_pending = False
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._run_task: asyncio.Task[None] | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._guild_ready_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._fatal: BaseException | None = None
        self._closing = False

    # -- Public surface -------------------------------------------------------

    @property
    def guilds(self) -> list[Guild]:
        return list(self._guilds.values())

    @property
    def running(self) -> bool:
        return self._run_task is not None and not self._run_task.done()

    def get_guild(self, guild_id: int) -> Guild | None:
        return self._guilds.get(guild_id)

    async def login(self, token: str) -> None:
        self._log(LogSeverity.INFO, "Logging in...")
        await self.rest.login(token)
        self._token = token
        self._log(LogSeverity.INFO, "Logged in")

    async def start(self) -> None:
        if not self._token:
            raise TransportError("login() must complete before start()")
        if self.running:
            return
        self._closing = False
        self._fatal = None
        self._run_task = asyncio.create_task(self._run(), name="discord-gateway")

    async def wait_closed(self) -> None:
        """Wait for the gateway loop to end, re-raising a fatal error."""
        if self._run_task is not None:
            await asyncio.shield(self._run_task)

    async def stop(self) -> None:
        self._closing = True
        self._log(LogSeverity.INFO, "Disconnecting")
        self._cancel_background()
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._run_task is not None and not self._run_task.done():
            self._run_task.cancel()
            try:
                await self._run_task
            except asyncio.CancelledError:
                pass
        await self.rest.close()
        self._log(LogSeverity.INFO, "Disconnected")

    async def register_command(self, guild_id: int, definition: CommandDefinition) -> dict[str, Any]:
        if self.rest.application_id is None:
            raise TransportError("Application id unknown; login() first")
        return await self.rest.create_guild_command(
            self.rest.application_id, guild_id, definition.to_payload(),
        )

    # -- Connection loop -------------------------------------------------------

    async def _run(self) -> None:
        while not self._closing:
            try:
                await self._connect_once()
            except GatewayError as exc:
                if self._closing:
                    break
                self._log(LogSeverity.WARNING, f"Gateway connection lost: {exc}", exc)
            except TransportError as exc:
                if self._closing:
                    break
                self._log(LogSeverity.ERROR, f"Gateway unavailable: {exc}", exc)
            if self._fatal is not None:
                raise self._fatal
            if self._closing:
                break
            self._log(LogSeverity.INFO, f"Reconnecting in {self.reconnect_delay:g}s")
            await asyncio.sleep(self.reconnect_delay)

    async def _connect_once(self) -> None:
        base = await self.rest.get_gateway_url()
        url = f"{base}/?v={GATEWAY_VERSION}&encoding=json"
        try:
            async with self.rest.session.ws_connect(url, autoping=True) as ws:
                self._ws = ws
                self._log(LogSeverity.INFO, "Connected to gateway")
                try:
                    async for msg in ws:
                        if msg.type == aiohttp.WSMsgType.TEXT:
                            try:
                                payload = json.loads(msg.data)
                            except ValueError as exc:
                                self._log(
                                    LogSeverity.WARNING, f"Discarding malformed gateway frame: {exc}", exc,
                                )
                                continue
                            if not await self.handle_payload(payload):
                                break
                        elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.ERROR):
                            break
                finally:
                    self._cancel_background()
                    self._ws = None
                close_code = ws.close_code
        except aiohttp.ClientError as exc:
            raise GatewayError(f"websocket error: {exc}") from exc

        if close_code in FATAL_CLOSE_CODES:
            self._log(LogSeverity.CRITICAL, f"Gateway closed with fatal code {close_code}")
            self._fatal = GatewayError(f"fatal close code {close_code}")
            return
        if not self._closing:
            raise GatewayError(f"gateway closed (code {close_code})")

    def _cancel_background(self) -> None:
        for task in (self._heartbeat_task, self._guild_ready_task):
            if task is not None and not task.done():
                task.cancel()
        self._heartbeat_task = None
        self._guild_ready_task = None

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._ws is None or self._ws.closed:
            raise GatewayError("not connected")
        await self._ws.send_str(json.dumps(payload))

    async def _close_for_reconnect(self) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close(code=4000)

    # -- Payload handling ------------------------------------------------------

    async def handle_payload(self, payload: dict[str, Any]) -> bool:
        """Process one gateway payload; ``False`` means reconnect."""
        op = payload.get("op")
        if payload.get("s") is not None:
            self._seq = payload["s"]

        if op == OP_HELLO:
            interval = payload["d"]["heartbeat_interval"] / 1000
            self._ack_pending = False
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop(interval))
            await self._identify()
        elif op == OP_HEARTBEAT_ACK:
            self._ack_pending = False
            self._log(LogSeverity.VERBOSE, "Heartbeat acknowledged")
        elif op == OP_HEARTBEAT:
            await self._send({"op": OP_HEARTBEAT, "d": self._seq})
        elif op == OP_RECONNECT:
            self._log(LogSeverity.INFO, "Gateway requested a reconnect")
            return False
        elif op == OP_INVALID_SESSION:
            self._log(LogSeverity.WARNING, "Gateway session invalidated")
            return False
        elif op == OP_DISPATCH:
            await self._handle_dispatch(payload.get("t") or "", payload.get("d") or {})
        else:
            self._log(LogSeverity.DEBUG, f"Ignoring unknown opcode {op}")
        return True

    async def _identify(self) -> None:
        await self._send({
            "op": OP_IDENTIFY,
            "d": {
                "token": self._token,
                "intents": self.intents,
                "properties": {"os": sys.platform, "browser": "slashbot", "device": "slashbot"},
            },
        })

    async def _heartbeat_loop(self, interval: float) -> None:
        await asyncio.sleep(interval * random.random())
        while True:
            if self._ack_pending:
                self._log(LogSeverity.WARNING, "Heartbeat not acknowledged; reconnecting")
                await self._close_for_reconnect()
                return
            self._ack_pending = True
            try:
                await self._send({"op": OP_HEARTBEAT, "d": self._seq})
            except (GatewayError, ConnectionResetError) as exc:
                self._log(LogSeverity.WARNING, f"Heartbeat failed: {exc}", exc)
                return
            self._log(LogSeverity.VERBOSE, "Heartbeat sent")
            await asyncio.sleep(interval)

    async def _handle_dispatch(self, event: str, data: dict[str, Any]) -> None:
        if event == "READY":
            await self._on_gateway_ready(data)
        elif event in ("GUILD_CREATE", "GUILD_DELETE") and not str(data.get("id", "")).isdigit():
            self._log(LogSeverity.WARNING, f"Discarding {event} without a guild id")
        elif event == "GUILD_CREATE":
            guild = Guild(id=int(data["id"]), name=data.get("name", ""))
            self._guilds[guild.id] = guild
            self._log(LogSeverity.VERBOSE, f"Connected to guild '{guild.name}' ({guild.id})")
            self._pending_guilds.discard(guild.id)
            if self._awaiting_ready and not self._pending_guilds:
                if self._guild_ready_task is not None:
                    self._guild_ready_task.cancel()
                    self._guild_ready_task = None
                await self._fire_ready()
        elif event == "GUILD_DELETE":
            guild_id = int(data["id"])
            self._pending_guilds.discard(guild_id)
            if not data.get("unavailable"):
                self._guilds.pop(guild_id, None)
        elif event == "INTERACTION_CREATE":
            self._on_interaction(data)
        else:
            self._log(LogSeverity.DEBUG, f"Unhandled dispatch {event}")

    async def _on_gateway_ready(self, data: dict[str, Any]) -> None:
        user = data.get("user") or {}
        application = data.get("application") or {}
        if self.rest.application_id is None and application.get("id"):
            self.rest.application_id = int(application["id"])
        self._guilds.clear()
        self._pending_guilds = {int(g["id"]) for g in data.get("guilds", [])}
        self._awaiting_ready = True
        self._log(
            LogSeverity.INFO,
            f"Session ready as {user.get('username', '?')}; "
            f"waiting for {len(self._pending_guilds)} guild(s)",
        )
        if not self._pending_guilds:
            await self._fire_ready()
        else:
            self._guild_ready_task = asyncio.create_task(self._guild_ready_timeout())

    async def _guild_ready_timeout(self) -> None:
        await asyncio.sleep(self.guild_ready_timeout)
        self._guild_ready_task = None
        if self._pending_guilds:
            self._log(
                LogSeverity.WARNING,
                f"{len(self._pending_guilds)} guild(s) did not become available in time",
            )
        try:
            await self._fire_ready()
        except Exception as exc:
            self._fatal = exc
            self._closing = True
            if self._ws is not None and not self._ws.closed:
                await self._ws.close()

    async def _fire_ready(self) -> None:
        self._awaiting_ready = False
        self._log(LogSeverity.INFO, "Ready")
        for callback in self.on_ready:
            await callback()

    def _on_interaction(self, data: dict[str, Any]) -> None:
        if data.get("type") != INTERACTION_APPLICATION_COMMAND:
            self._log(LogSeverity.DEBUG, f"Ignoring interaction type {data.get('type')}")
            return
        try:
            invocation = self.build_invocation(data)
        except (KeyError, TypeError, ValueError) as exc:
            self._log(LogSeverity.WARNING, f"Discarding malformed interaction: {exc!r}", exc)
            return
        for callback in self.on_slash_command:
            self._spawn(self._run_slash_command(callback, invocation))

    def build_invocation(self, data: dict[str, Any]) -> Invocation:
        command = data.get("data") or {}
        user = (data.get("member") or {}).get("user") or data.get("user") or {}
        guild_id = data.get("guild_id")
        return Invocation(
            command_name=command.get("name", ""),
            options=parse_option_values(command.get("options")),
            responder=InteractionResponder(self.rest, str(data["id"]), data["token"]),
            user_id=int(user.get("id", 0)),
            channel_id=int(data.get("channel_id") or 0),
            guild_id=int(guild_id) if guild_id else None,
            interaction_id=str(data["id"]),
        )

    async def _run_slash_command(self, callback: SlashCommandCallback, invocation: Invocation) -> None:
        try:
            await callback(invocation)
        except Exception as exc:
            self._log(
                LogSeverity.ERROR,
                f"Slash command '{invocation.command_name}' failed: {exc}",
                exc,
            )

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # -- Diagnostics -----------------------------------------------------------

    def _log(self, severity: LogSeverity, message: str, exc: BaseException | None = None) -> None:
        entry = LogMessage(severity=severity, source="Gateway", message=message, exception=exc)
        if not self.on_log:
            logger.debug("%s", entry)
            return
        for callback in self.on_log:
            callback(entry)
