"""Attribution lookups: who sent a message and from which room."""

from __future__ import annotations

import re
from typing import Optional, Union

from core.models import ChatMessage
from core.ports import RoomDirectoryPort

# "Wechaty Developers' Home 8" -> "Home 8"
DEFAULT_SHORT_NAME_PATTERN = r"\s*(\S*\s*\S+)\Z"

NONAME = "Noname"
NOWHERE = "Nowhere"


class NameResolver:
    """Derive the sender display name and room short name of a message."""

    def __init__(
        self,
        directory: RoomDirectoryPort,
        pattern: Union[str, re.Pattern] = DEFAULT_SHORT_NAME_PATTERN,
    ) -> None:
        self._directory = directory
        self._pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    async def get_sender_display_name(self, message: ChatMessage) -> str:
        """Return the room alias, then the global name, then ``Noname``."""

        sender = message.sender
        if sender is None:
            return NONAME

        alias = None
        if message.room is not None:
            alias = await self._directory.room_alias(message.room.id, sender.id)
        return alias or sender.name or NONAME

    async def get_room_short_name(self, message: ChatMessage) -> Optional[str]:
        """Return the trailing one or two words of the room topic, if any."""

        if message.room is None:
            return None

        topic = await self._directory.room_topic(message.room.id)
        if not topic:
            return None

        matched = self._pattern.search(topic)
        if not matched:
            return None
        return matched.group(1)

    async def attribution_prefix(self, message: ChatMessage) -> str:
        """Return the ``[sender@room]`` label for a relayed message."""

        display_name = await self.get_sender_display_name(message)
        short_name = await self.get_room_short_name(message) or NOWHERE
        return f"[{display_name}@{short_name}]"
