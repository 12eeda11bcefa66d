"""Application entry point for the judgebot command router."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.console import ConsoleReplySink, console_context
from adapters.error_reporter import LoggingErrorReporter
from adapters.rules_file import load_rules_file
from adapters.scryfall import CardMetadataResolver, CardResolver, RandomCardResolver, ScryfallClient
from adapters.telegram_mapper import build_context
from adapters.telegram_sink import TelegramReplySink
from client import build_client
from core.config import DedupConfig, RouterConfig
from core.dedup import Deduplicator, RecentReplyStore
from core.dispatcher import Dispatcher
from core.models import MessageContext
from core.ports import ReplySinkPort
from core.processor import GreetingResponder, MessageProcessor
from core.resolvers import CoinResolver, DiceResolver, HelpResolver, PolicyResolver
from core.routing import build_routes, select_route
from core.rules import RulesResolver

NAME = "JUDGEBOT"
FONT = "tarty-1"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _MaskingFormatter(logging.Formatter):
    """Replaces secret values with *** in rendered records, tracebacks included."""

    def __init__(self, secrets: list[str]) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _rotating_file_handler(file_cfg: dict) -> RotatingFileHandler:
    path = file_cfg.get("path", "logs/judgebot.log")
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    # Secrets live in .env; load it before reading the values to mask.
    load_dotenv()
    formatter = _MaskingFormatter([os.getenv(name, "") for name in config.get("redact", [])])

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(_rotating_file_handler(file_cfg))
    for handler in handlers:
        handler.setFormatter(formatter)

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=handlers)


class _Bot:
    """Greeting and command handling for one transport."""

    def __init__(self, sink: ReplySinkPort) -> None:
        scryfall = ScryfallClient(settings.SCRYFALL_URL, timeout=settings.SCRYFALL_TIMEOUT)
        routes = build_routes(
            {
                "help": HelpResolver(),
                "policy": PolicyResolver(settings.MTR_URL, settings.IPG_URL),
                "rules": RulesResolver(load_rules_file(settings.RULES_PATH)),
                "card_metadata": CardMetadataResolver(scryfall),
                "random": RandomCardResolver(scryfall),
                "dice": DiceResolver(),
                "coin": CoinResolver(),
                "card": CardResolver(scryfall),
            }
        )
        dispatcher = Dispatcher(
            select=lambda query: select_route(query, routes),
            reporter=LoggingErrorReporter(),
        )
        self.deduplicator = Deduplicator(
            RecentReplyStore(),
            DedupConfig(
                window_seconds=settings.DEDUP_WINDOW_SECONDS,
                preview_chars=settings.DEDUP_PREVIEW_CHARS,
                exempt_phrases=settings.DEDUP_EXEMPT_PHRASES,
            ),
        )
        router_config = RouterConfig(
            max_line_width=settings.MAX_LINE_WIDTH,
            candidate_max_length=settings.CANDIDATE_MAX_LENGTH,
            greeting=settings.GREETING,
        )
        self.greeter = GreetingResponder(sink, router_config.greeting)
        self.processor = MessageProcessor(dispatcher, self.deduplicator, sink, router_config)

    async def handle(self, context: MessageContext) -> None:
        if await self.greeter.handle(context):
            return
        await self.processor.handle(context)

    async def sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.deduplicator.sweep()


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting judgebot")

    client, bot_token = build_client()
    bot = _Bot(TelegramReplySink(client, settings.PARSE_MODE))

    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            await bot.handle(await build_context(event))
        except Exception:
            logger.exception("Error while processing message")

    client.start(bot_token=bot_token)
    client.loop.create_task(bot.sweep_forever(settings.DEDUP_SWEEP_INTERVAL_SECONDS))
    logger.info("Bot connected. Listening for commands...")
    client.run_until_disconnected()


def _console(public: bool) -> None:
    _configure_logging()
    bot = _Bot(ConsoleReplySink())

    async def _loop() -> None:
        for line in sys.stdin:
            await bot.handle(console_context(line.rstrip("\n"), public=public))

    asyncio.run(_loop())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="judgebot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the Telegram bot")
    console_parser = subparsers.add_parser(
        "console",
        help="Read chat lines from stdin and print the replies.",
    )
    console_parser.add_argument(
        "--public",
        action="store_true",
        help="Treat input as a public channel message.",
    )

    args = parser.parse_args(argv)
    if args.command == "console":
        _console(args.public)
        return
    _run()


if __name__ == "__main__":
    main()
