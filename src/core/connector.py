"""Room connectors: the relay pipeline for one topology instance.

Each connector enforces a strict order:
1) Admit only room messages from this topology that we did not send
2) Run the blacklist filter chain
3) Compute destinations from the topology shape
4) Map the message once into outbound items
5) Send the items to every destination, in order

Send failures are contained per destination; nothing raises out of
``RoomConnector.handle``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence

from core.filters import FilterChain
from core.mappers import MessageMapper
from core.models import ChatMessage, OutboundItem
from core.ports import TransportPort
from core.room_keys import build_room_index
from core.topology import Topology

LOGGER = logging.getLogger(__name__)


class RoomConnector:
    """Relays messages between the rooms of a single topology."""

    def __init__(
        self,
        name: str,
        topology: Topology,
        mapper: MessageMapper,
        filters: FilterChain,
        transport: TransportPort,
    ) -> None:
        self.name = name
        self.topology = topology
        self._mapper = mapper
        self._filters = filters
        self._transport = transport
        self._room_index = build_room_index(topology.members())

    def origin_of(self, message: ChatMessage) -> Optional[str]:
        """Return the configured key of the message's room, if it belongs here."""

        if message.room is None:
            return None
        for room_key in message.room.keys():
            if room_key.startswith("@"):
                room_key = room_key.lower()
            origin = self._room_index.get(room_key)
            if origin is not None:
                return origin
        return None

    async def handle(self, message: ChatMessage) -> None:
        """Process one inbound message through the connector pipeline."""

        # Our own relayed copies come back as messages too; never re-relay them.
        if message.is_self:
            return

        origin = self.origin_of(message)
        if origin is None:
            return

        destinations = self.topology.destinations(origin)
        if not destinations:
            return

        try:
            if await self._filters.blocks(message):
                LOGGER.debug("[%s] Blacklisted message %s from %s", self.name, message.message_id, origin)
                return
            items = await self._mapper.map(message)
        except Exception:
            LOGGER.exception("[%s] Failed to prepare message %s from %s", self.name, message.message_id, origin)
            return

        if not items:
            LOGGER.debug("[%s] Mapper dropped %s message from %s", self.name, message.kind.value, origin)
            return

        delivered = 0
        for room_key in destinations:
            if await self._send_items(room_key, items):
                delivered += 1

        LOGGER.info(
            "[%s] Relayed %s message from %s to %s/%s rooms",
            self.name,
            message.kind.value,
            origin,
            delivered,
            len(destinations),
        )

    async def _send_items(self, room_key: str, items: Sequence[OutboundItem]) -> bool:
        for item in items:
            try:
                await self._transport.send(room_key, item)
            except Exception:
                # Skip the rest for this room so media never arrives without
                # its attribution line; other rooms are unaffected.
                LOGGER.exception("[%s] Failed to send to %s", self.name, room_key)
                return False
        return True


class RoomRelay:
    """Hands every inbound message to all connectors as independent tasks."""

    def __init__(self, connectors: Iterable[RoomConnector]) -> None:
        self.connectors: List[RoomConnector] = list(connectors)

    async def handle(self, message: ChatMessage) -> None:
        if not self.connectors:
            return
        await asyncio.gather(*(connector.handle(message) for connector in self.connectors))
