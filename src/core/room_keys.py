"""Helpers for working with roomlink room keys.

A room key is either ``@username`` for public chats or ``chat_id:<id>`` for
everything else.
"""

from __future__ import annotations

from typing import Iterable, Optional

CHAT_ID_PREFIX = "chat_id:"

# Telethon marks channel/supergroup ids as -(10**12 + channel_id).
CHANNEL_OFFSET = 10**12


def parse_chat_id(room_key: str) -> Optional[int]:
    """Return the numeric id of a ``chat_id:`` key, or None."""

    if not room_key.startswith(CHAT_ID_PREFIX):
        return None
    try:
        return int(room_key[len(CHAT_ID_PREFIX):])
    except ValueError:
        return None


def _bare_chat_ids(raw_chat_id: int) -> set[int]:
    """Return the unmarked ids a chat_id key may refer to."""

    if raw_chat_id > 0:
        return {raw_chat_id}
    if raw_chat_id <= -CHANNEL_OFFSET:
        return {-raw_chat_id - CHANNEL_OFFSET}

    bare = {-raw_chat_id}
    # Web clients show short channel ids as a literal "-100" prefix.
    raw_text = str(raw_chat_id)
    if raw_text.startswith("-100") and raw_text[4:].isdigit():
        bare.add(int(raw_text[4:]))
    return bare


def _expand_chat_id_variants(raw_chat_id: int) -> set[int]:
    """Return equivalent chat id variants (peer id, chat id, channel id)."""

    variants: set[int] = {raw_chat_id}
    for bare_id in _bare_chat_ids(raw_chat_id):
        variants.add(bare_id)
        variants.add(-bare_id)
        variants.add(-CHANNEL_OFFSET - bare_id)
        variants.add(int(f"-100{bare_id}"))
    return variants


def expand_room_key_variants(room_key: str) -> set[str]:
    """Expand a room key to include equivalent chat_id variants."""

    if room_key.startswith("@"):
        return {room_key.lower()}

    raw_chat_id = parse_chat_id(room_key)
    if raw_chat_id is None:
        return {room_key}
    return {f"{CHAT_ID_PREFIX}{variant}" for variant in _expand_chat_id_variants(raw_chat_id)}


def build_room_index(room_keys: Iterable[str]) -> dict[str, str]:
    """Map every variant of the given keys back to the configured key.

    The first configured key wins when two keys share a variant.
    """

    index: dict[str, str] = {}
    for room_key in room_keys:
        for variant in expand_room_key_variants(room_key):
            index.setdefault(variant, room_key)
    return index
