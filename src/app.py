"""Application entry point for the spamguard relay."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from telethon import events

import settings
from adapters.ollama_client import OllamaCompletionClient
from adapters.telegram_chat import TelegramChatGateway
from adapters.telegram_mapper import build_inbound_message
from client import build_client
from core.errors import ConfigMissing
from core.models import InboundMessage
from core.processor import ModerationProcessor

NAME = "SPAMGUARD"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", settings.DEFAULT_REDACT_PATTERNS):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict) -> None:
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/spamguard.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _bootstrap() -> logging.Logger:
    """Load .env and config.json, then configure logging."""

    env_loaded = settings.load_environment()
    _configure_logging(settings.load_json_config().get("logging", {}))
    logger = logging.getLogger(__name__)
    if not env_loaded:
        logger.warning("No .env file loaded; reading configuration from the process environment")
    return logger


class _ConsoleChat:
    """Chat stand-in for the check command: prints instead of sending."""

    async def send_message(self, conversation_id: int, text: str, reply_to: Optional[int] = None) -> None:
        prefix = f"[reply to {reply_to}] " if reply_to is not None else ""
        print(f"{prefix}{text}")

    async def delete_message(self, conversation_id: int, message_id: int) -> None:
        print(f"[would delete message {message_id}]")


def _check(text: str) -> None:
    logger = _bootstrap()
    completion_config = settings.load_completion_config()
    logger.info("Checking text against model %s", completion_config.model)

    processor = ModerationProcessor(
        model=completion_config.model,
        completion=OllamaCompletionClient(completion_config),
        chat=_ConsoleChat(),
    )
    message = InboundMessage(conversation_id=0, message_id=0, sender="cli", text=text)
    result = asyncio.run(processor.handle(message))

    decision = result.outcome.decision.value if result.outcome else "-"
    print(f"state={result.state.value} decision={decision}")


def _run() -> None:
    _print_banner()
    logger = _bootstrap()

    config = settings.load_config()
    logger.info("Starting spamguard (model %s)", config.completion.model)

    client = build_client(config.telegram)
    processor = ModerationProcessor(
        model=config.completion.model,
        completion=OllamaCompletionClient(config.completion),
        chat=TelegramChatGateway(client),
    )

    # Single handler keeps Telethon integration minimal and defers all
    # filtering to the core processor for consistency and testability.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            message = build_inbound_message(event.message)
            await processor.handle(message)
        except Exception:
            logger.exception("Error while processing message")

    # Explicit lifecycle management makes start/shutdown behavior obvious.
    client.start(bot_token=config.telegram.bot_token)
    me = client.loop.run_until_complete(client.get_me())
    logger.info("Bot @%s started. Listening for incoming messages...", me.username)
    client.run_until_disconnected()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="spamguard")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the moderation relay")
    check_parser = subparsers.add_parser(
        "check",
        help="Classify one text with the configured model and print the reply (no Telegram).",
    )
    check_parser.add_argument("text", help="Message text to classify")

    args = parser.parse_args(argv)
    try:
        if args.command == "check":
            _check(args.text)
            return
        _run()
    except ConfigMissing as exc:
        logging.getLogger(__name__).critical("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
