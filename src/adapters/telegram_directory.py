"""Telegram room directory adapter.

Room topics are chat titles; per-room aliases are the custom admin titles
("rank") members carry in a group. Lookups degrade to None on any failure.
"""

from __future__ import annotations

import logging
from typing import Optional

from adapters.telegram_transport import peer_from_room_key

LOGGER = logging.getLogger(__name__)


class TelegramRoomDirectory:
    """Resolve chat titles and member titles through the Telethon client."""

    def __init__(self, client) -> None:
        self._client = client

    async def room_topic(self, room_key: str) -> Optional[str]:
        try:
            entity = await self._client.get_entity(peer_from_room_key(room_key))
        except Exception:
            LOGGER.debug("Topic lookup failed for %s", room_key, exc_info=True)
            return None
        title = getattr(entity, "title", None)
        return str(title) if title else None

    async def room_alias(self, room_key: str, contact_id: str) -> Optional[str]:
        try:
            permissions = await self._client.get_permissions(peer_from_room_key(room_key), int(contact_id))
        except Exception:
            LOGGER.debug("Alias lookup failed for %s in %s", contact_id, room_key, exc_info=True)
            return None
        participant = getattr(permissions, "participant", None)
        rank = getattr(participant, "rank", None)
        return str(rank) if rank else None
