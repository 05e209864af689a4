"""Application entry point for the roomlink relay."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.telegram_directory import TelegramRoomDirectory
from adapters.telegram_mapper import build_message, room_from_chat
from adapters.telegram_transport import TelegramTransport
from connectors import build_connectors, build_relay_config
from core.connector import RoomRelay
from core.names import NameResolver
from get_session import authorize, build_client

NAME = "ROOMLINK"
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
    if not redact_cfg.get("enabled", False):
        return []
    values = [os.getenv(name) for name in redact_cfg.get("patterns", [])]
    return sorted({value for value in values if value}, key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = _RedactingFormatter(
        _collect_redaction_values(config),
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/roomlink.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    if not handlers:
        return

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting roomlink")

    # Validate topologies before touching the network so config mistakes
    # fail fast instead of after login.
    relay_config = build_relay_config(
        settings.TOPOLOGIES_CONFIG,
        headquarters=settings.HEADQUARTERS,
        blacklist=settings.BLACKLIST,
        short_name_pattern=settings.SHORT_NAME_PATTERN,
    )
    logger.info("%s topologies are loaded", len(relay_config.topologies))

    client = build_client()
    client.loop.run_until_complete(client.connect())
    client.loop.run_until_complete(authorize(client))

    names = NameResolver(TelegramRoomDirectory(client), relay_config.short_name_pattern)
    relay = RoomRelay(build_connectors(relay_config, names, TelegramTransport(client)))

    # Outgoing messages (including our own relayed copies) are excluded at
    # the event level; connectors also skip self-sent messages.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            message = await build_message(event.message)
            await relay.handle(message)
        except Exception:
            logger.exception("Error while relaying message")

    client.start()
    logger.info("Client connected. Relaying messages across %s connectors...", len(relay.connectors))
    client.run_until_disconnected()


def _dialog_type(dialog: Any) -> str:
    if getattr(dialog, "is_channel", False):
        entity = getattr(dialog, "entity", None)
        if getattr(entity, "megagroup", False):
            return "group"
        return "channel"
    if getattr(dialog, "is_group", False):
        return "group"
    return "chat"


async def _list_group_dialogs(client) -> None:
    # Room keys printed here can be pasted straight into config.json.
    found = False
    async for dialog in client.iter_dialogs():
        if dialog.is_user:
            continue
        found = True
        room_keys = " = ".join(room_from_chat(dialog.entity, dialog.id).keys())
        print(f"{_dialog_type(dialog)} | {dialog.name or dialog.id} | {room_keys}")

    if not found:
        print("No group dialogs found for this account.")


def _discover() -> None:
    _print_banner()
    client = build_client()

    async def _run_discover() -> None:
        await client.connect()
        if not await client.is_user_authorized():
            print("Authorization required. Starting login...")
            await authorize(client)
        await _list_group_dialogs(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_discover())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="roomlink")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start relaying messages")
    subparsers.add_parser(
        "discover",
        help="List group chats with the room keys to use in config.json.",
    )

    args = parser.parse_args(argv)
    if args.command == "discover":
        _discover()
        return
    _run()


if __name__ == "__main__":
    main()
