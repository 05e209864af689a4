from __future__ import annotations

import asyncio
from typing import Any, Optional

from telethon.tl.types import User

from adapters.telegram_mapper import build_message, message_kind, room_from_chat, room_key_from_chat
from core.connector import RoomConnector
from core.filters import build_filter_chain
from core.mappers import UnidirectionalMapper
from core.models import MessageKind
from core.names import NameResolver
from core.topology import OneToMany


class DummyChat:
    def __init__(self, username: "str | None" = None, title: str = "Dev Home 8") -> None:
        self.username = username
        self.title = title


class DummyMessage:
    def __init__(
        self,
        *,
        chat_id: int = -100123,
        message_id: int = 10,
        text: str = "hello",
        chat: Optional[DummyChat] = None,
        sender: Any = None,
        sender_id: Optional[int] = 42,
        is_private: bool = False,
        out: bool = False,
        **media: Any,
    ) -> None:
        self.chat_id = chat_id
        self.id = message_id
        self.raw_text = text
        self.is_private = is_private
        self.out = out
        self.sender_id = sender_id
        self._chat = chat or DummyChat()
        self._sender = sender
        self.media = media.pop("media", None)
        for name in ("photo", "sticker", "gif", "voice", "video_note", "video", "audio",
                     "contact", "geo", "venue", "poll", "document", "web_preview"):
            setattr(self, name, media.get(name))

    async def get_chat(self) -> DummyChat:
        return self._chat

    async def get_sender(self) -> Any:
        return self._sender


def test_room_key_prefers_username() -> None:
    assert room_key_from_chat(DummyChat(username="DevHome"), -100123) == "@devhome"
    assert room_key_from_chat(DummyChat(), -100123) == "chat_id:-100123"


def test_message_kind_detection() -> None:
    media = object()
    assert message_kind(DummyMessage()) is MessageKind.TEXT
    assert message_kind(DummyMessage(media=media, photo=object())) is MessageKind.IMAGE
    # Voice notes and stickers are documents too; the specific kind wins.
    assert message_kind(DummyMessage(media=media, voice=object(), document=object())) is MessageKind.VOICE
    assert message_kind(DummyMessage(media=media, sticker=object(), document=object())) is MessageKind.EMOTICON
    assert message_kind(DummyMessage(media=media, gif=object(), video=object())) is MessageKind.EMOTICON
    assert message_kind(DummyMessage(media=media, video=object())) is MessageKind.VIDEO
    assert message_kind(DummyMessage(media=media, document=object())) is MessageKind.ATTACHMENT
    assert message_kind(DummyMessage(media=media, geo=object())) is MessageKind.LOCATION
    assert message_kind(DummyMessage(media=media, web_preview=object())) is MessageKind.TEXT
    assert message_kind(DummyMessage(text="")) is MessageKind.UNKNOWN


def test_build_message_from_group() -> None:
    telethon_message = DummyMessage(sender=User(id=42, first_name="Alice", last_name="Liddell"))
    message = asyncio.run(build_message(telethon_message))

    assert message.room is not None
    assert message.room.id == "chat_id:-100123"
    assert message.sender is not None
    assert message.sender.id == "42"
    assert message.sender.name == "Alice Liddell"
    assert message.kind is MessageKind.TEXT
    assert message.text == "hello"
    assert message.handle is telethon_message
    assert message.message_id == 10
    assert not message.is_self


def test_build_message_private_chat_has_no_room() -> None:
    message = asyncio.run(build_message(DummyMessage(is_private=True, sender=User(id=43, first_name="Bob"))))
    assert message.room is None


def test_build_message_without_sender() -> None:
    message = asyncio.run(build_message(DummyMessage(sender=None, sender_id=None, out=True)))
    assert message.sender is None
    assert message.is_self


def test_public_group_keeps_chat_id_key() -> None:
    room = room_from_chat(DummyChat(username="HqGroup"), -1001111111111)
    assert room.id == "@hqgroup"
    assert room.keys() == ("@hqgroup", "chat_id:-1001111111111")
    assert room_from_chat(DummyChat(), -100123).keys() == ("chat_id:-100123",)


def test_public_group_configured_by_chat_id_is_relayed() -> None:
    class RecordingTransport:
        def __init__(self) -> None:
            self.sent: list = []

        async def send(self, room_key: str, item: Any) -> None:
            self.sent.append((room_key, item))

    class EmptyDirectory:
        async def room_topic(self, room_key: str) -> Optional[str]:
            return None

        async def room_alias(self, room_key: str, contact_id: str) -> Optional[str]:
            return None

    hq = "chat_id:-1001111111111"
    transport = RecordingTransport()
    connector = RoomConnector(
        name="broadcast",
        topology=OneToMany(one=hq, many=("chat_id:-1002222222222",)),
        mapper=UnidirectionalMapper(NameResolver(EmptyDirectory()), hq),
        filters=build_filter_chain([]),
        transport=transport,
    )
    telethon_message = DummyMessage(
        chat_id=-1001111111111,
        chat=DummyChat(username="HqGroup"),
        sender=User(id=42, first_name="Alice"),
        media=object(),
        photo=object(),
    )

    message = asyncio.run(build_message(telethon_message))
    asyncio.run(connector.handle(message))

    # Media from the primary room is forwarded without an attribution line.
    assert transport.sent == [("chat_id:-1002222222222", message)]
    assert message.handle is telethon_message
