"""Ports (interfaces) used by the relay core.

Ports define the minimal contracts for directory lookups and sends so that
the core can be reused with different chat transports.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import OutboundItem


class RoomDirectoryPort(Protocol):
    """Read-only room lookups required by the name resolver.

    Implementations return ``None`` when the data is missing or the lookup
    fails; they never raise.
    """

    async def room_topic(self, room_key: str) -> Optional[str]:
        ...

    async def room_alias(self, room_key: str, contact_id: str) -> Optional[str]:
        ...


class TransportPort(Protocol):
    """Send primitive required by the room connectors."""

    async def send(self, room_key: str, item: OutboundItem) -> None:
        ...
