"""Telegram send adapter.

Text items go out as new messages; forwarded items are native Telegram
forwards of the original message.
"""

from __future__ import annotations

from typing import Union

from core.models import ChatMessage, OutboundItem
from core.room_keys import parse_chat_id


def peer_from_room_key(room_key: str) -> Union[str, int]:
    """Return something Telethon can resolve into an entity."""

    if room_key.startswith("@"):
        return room_key
    chat_id = parse_chat_id(room_key)
    if chat_id is None:
        raise ValueError(f"Unsupported room key: {room_key}")
    return chat_id


class TelegramTransport:
    """Transport adapter that sends through the logged-in user session."""

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, room_key: str, item: OutboundItem) -> None:
        peer = peer_from_room_key(room_key)
        if isinstance(item, ChatMessage):
            if item.handle is None:
                raise ValueError(f"Message {item.message_id} has no forwardable handle")
            await self._client.forward_messages(peer, item.handle)
            return
        await self._client.send_message(peer, item)
