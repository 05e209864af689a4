"""Message mappers: turn an admitted message into outbound items.

Mappers never send anything themselves; the only awaits are the attribution
lookups done through the name resolver.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import ChatMessage, MessageKind, OutboundItem
from core.names import NameResolver
from core.room_keys import expand_room_key_variants


class MessageMapper(Protocol):
    async def map(self, message: ChatMessage) -> List[OutboundItem]:
        ...


class UnidirectionalMapper:
    """Mapper for one-way topologies (one-to-many, many-to-one).

    Text is quoted with an attribution prefix. Any other kind is forwarded
    as-is, with an attribution line in front unless it comes from the
    primary room.
    """

    def __init__(self, names: NameResolver, primary_room: Optional[str]) -> None:
        self._names = names
        self._primary_keys = expand_room_key_variants(primary_room) if primary_room else set()

    def _is_primary(self, message: ChatMessage) -> bool:
        if message.room is None:
            return False
        return any(expand_room_key_variants(room_key) & self._primary_keys for room_key in message.room.keys())

    async def map(self, message: ChatMessage) -> List[OutboundItem]:
        prefix = await self._names.attribution_prefix(message)

        if message.kind is MessageKind.TEXT:
            return [f"{prefix}: {message.text}"]

        items: List[OutboundItem] = [message]
        if not self._is_primary(message):
            items.insert(0, f"{prefix}: {message.kind.value}")
        return items


class BidirectionalMapper:
    """Mapper for many-to-many meshes: quoted text only, media is dropped."""

    def __init__(self, names: NameResolver) -> None:
        self._names = names

    async def map(self, message: ChatMessage) -> List[OutboundItem]:
        if message.kind is not MessageKind.TEXT:
            return []

        prefix = await self._names.attribution_prefix(message)
        return [f"{prefix}: {message.text}"]
