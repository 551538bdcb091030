"""Process entry point for the ``slashbot`` console script."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal

from ..config.settings import Settings
from ..messaging.commands import DuplicateCommandError
from ..services.logs import configure_logging
from ..transport.errors import TransportError
from .lifecycle import BotService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slashbot",
        description="Run the Discord slash-command bot until interrupted.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Read settings from this .env file (default: DOTENV_PATH or ./.env).",
    )
    return parser


async def _serve(settings: Settings) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops; Ctrl+C still raises KeyboardInterrupt.
            pass
    await BotService(settings).run(stop)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.env_file:
        os.environ["DOTENV_PATH"] = args.env_file

    settings = Settings()
    configure_logging(settings.log_level_value)
    try:
        settings.validate()
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    try:
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except DuplicateCommandError as exc:
        logger.critical("Invalid command catalog: %s", exc, exc_info=True)
        return 1
    except TransportError as exc:
        logger.critical("Discord connection failed: %s", exc, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
