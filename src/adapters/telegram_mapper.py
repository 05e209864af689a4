"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the relay core.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon import utils
from telethon.tl.custom import Message

from core.models import ChatMessage, Contact, MessageKind, Room


def room_key_from_chat(chat: Any, chat_id: Optional[int]) -> str:
    """Normalize a room key using a single rule enforced across the app."""

    username = getattr(chat, "username", None)

    if isinstance(username, str) and username:
        return f"@{username.lower()}"

    # Fallback: always stable and universal
    return f"chat_id:{chat_id}"


def room_from_chat(chat: Any, chat_id: Optional[int]) -> Room:
    """Build a Room that keeps the chat_id key next to a public username."""

    room_key = room_key_from_chat(chat, chat_id)
    chat_key = f"chat_id:{chat_id}"
    if room_key == chat_key or chat_id is None:
        return Room(id=room_key)
    return Room(id=room_key, alt_ids=(chat_key,))


def message_kind(message: Message) -> MessageKind:
    """Classify a Telethon message into a core message kind."""

    # Order matters: stickers, gifs and voice notes are documents too.
    if getattr(message, "photo", None):
        return MessageKind.IMAGE
    if getattr(message, "sticker", None) or getattr(message, "gif", None):
        return MessageKind.EMOTICON
    if getattr(message, "voice", None):
        return MessageKind.VOICE
    if getattr(message, "video_note", None) or getattr(message, "video", None):
        return MessageKind.VIDEO
    if getattr(message, "audio", None):
        return MessageKind.AUDIO
    if getattr(message, "contact", None):
        return MessageKind.CONTACT
    if getattr(message, "geo", None) or getattr(message, "venue", None):
        return MessageKind.LOCATION
    if getattr(message, "poll", None):
        return MessageKind.POLL
    if getattr(message, "document", None):
        return MessageKind.ATTACHMENT

    # Link previews are still plain text for relay purposes.
    media = getattr(message, "media", None)
    if (media is None or getattr(message, "web_preview", None)) and message.raw_text:
        return MessageKind.TEXT
    return MessageKind.UNKNOWN


def _contact_from_sender(sender: Any, sender_id: Optional[int]) -> Optional[Contact]:
    if sender_id is None:
        return None
    name = utils.get_display_name(sender) if sender is not None else ""
    return Contact(id=str(sender_id), name=name or None)


async def build_message(message: Message) -> ChatMessage:
    """Build a core ChatMessage from a Telethon Message."""

    room = None
    if not message.is_private:
        chat = await message.get_chat()
        room = room_from_chat(chat, message.chat_id)

    sender = await message.get_sender()

    return ChatMessage(
        kind=message_kind(message),
        sender=_contact_from_sender(sender, message.sender_id),
        room=room,
        text=message.raw_text or "",
        handle=message,
        is_self=bool(message.out),
        message_id=message.id,
    )
