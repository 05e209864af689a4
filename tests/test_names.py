from __future__ import annotations

import asyncio
from typing import Optional

from core.models import ChatMessage, Contact, MessageKind, Room
from core.names import NameResolver


class FakeDirectory:
    def __init__(
        self,
        topics: Optional[dict[str, str]] = None,
        aliases: Optional[dict[tuple[str, str], str]] = None,
    ) -> None:
        self.topics = topics or {}
        self.aliases = aliases or {}

    async def room_topic(self, room_key: str) -> Optional[str]:
        return self.topics.get(room_key)

    async def room_alias(self, room_key: str, contact_id: str) -> Optional[str]:
        return self.aliases.get((room_key, contact_id))


def _message(
    *, room: Optional[str] = "@home", sender: Optional[Contact] = Contact(id="1", name="Alice")
) -> ChatMessage:
    return ChatMessage(
        kind=MessageKind.TEXT,
        sender=sender,
        room=Room(id=room) if room else None,
        text="hi",
    )


def test_display_name_prefers_room_alias() -> None:
    names = NameResolver(FakeDirectory(aliases={("@home", "1"): "Ali"}))
    assert asyncio.run(names.get_sender_display_name(_message())) == "Ali"


def test_display_name_falls_back_to_global_name() -> None:
    names = NameResolver(FakeDirectory())
    assert asyncio.run(names.get_sender_display_name(_message())) == "Alice"


def test_display_name_falls_back_to_noname() -> None:
    names = NameResolver(FakeDirectory())
    nameless = _message(sender=Contact(id="1", name=None))
    assert asyncio.run(names.get_sender_display_name(nameless)) == "Noname"
    assert asyncio.run(names.get_sender_display_name(_message(sender=None))) == "Noname"


def test_display_name_without_room_skips_alias_lookup() -> None:
    names = NameResolver(FakeDirectory(aliases={("@home", "1"): "Ali"}))
    assert asyncio.run(names.get_sender_display_name(_message(room=None))) == "Alice"


def test_room_short_name_takes_last_two_words() -> None:
    names = NameResolver(FakeDirectory(topics={"@home": "Wechaty Developers' Home 8"}))
    assert asyncio.run(names.get_room_short_name(_message())) == "Home 8"


def test_room_short_name_single_word_topic() -> None:
    names = NameResolver(FakeDirectory(topics={"@home": "Lobby"}))
    assert asyncio.run(names.get_room_short_name(_message())) == "Lobby"


def test_room_short_name_absent_cases() -> None:
    names = NameResolver(FakeDirectory(topics={"@home": "trailing space "}))
    assert asyncio.run(names.get_room_short_name(_message())) is None
    assert asyncio.run(names.get_room_short_name(_message(room="@other"))) is None
    assert asyncio.run(names.get_room_short_name(_message(room=None))) is None


def test_attribution_prefix_uses_fallbacks() -> None:
    names = NameResolver(FakeDirectory())
    assert asyncio.run(names.attribution_prefix(_message(sender=None))) == "[Noname@Nowhere]"


def test_custom_short_name_pattern() -> None:
    names = NameResolver(FakeDirectory(topics={"@home": "Team #42"}), r"#(\d+)$")
    assert asyncio.run(names.get_room_short_name(_message())) == "42"


def test_room_short_name_rejects_trailing_newline() -> None:
    names = NameResolver(FakeDirectory(topics={"@home": "Home 8\n"}))
    assert asyncio.run(names.get_room_short_name(_message())) is None
