"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class MessageKind(str, Enum):
    """Kind tag of an inbound message; the value doubles as its display name."""

    UNKNOWN = "Unknown"
    ATTACHMENT = "Attachment"
    AUDIO = "Audio"
    CONTACT = "Contact"
    EMOTICON = "Emoticon"
    IMAGE = "Image"
    LOCATION = "Location"
    POLL = "Poll"
    TEXT = "Text"
    VIDEO = "Video"
    VOICE = "Voice"


@dataclass(frozen=True)
class Contact:
    """A chat participant as seen by the core."""

    id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Room:
    """A group chat addressed by its room key.

    ``alt_ids`` lists other keys the same chat is known by, e.g. the
    ``chat_id:`` key of a chat addressed by its public username.
    """

    id: str
    alt_ids: Tuple[str, ...] = ()

    def keys(self) -> Tuple[str, ...]:
        return (self.id, *self.alt_ids)


@dataclass(frozen=True)
class ChatMessage:
    """Minimal inbound message used by the relay pipeline.

    ``handle`` is whatever the transport needs to forward the original
    message; the core never looks inside it.
    """

    kind: MessageKind
    sender: Optional[Contact]
    room: Optional[Room]
    text: str = ""
    handle: Any = None
    is_self: bool = False
    message_id: int = 0


# Literal text, or the original message forwarded verbatim.
OutboundItem = Union[str, ChatMessage]
