"""Blacklist filter chain (core domain)."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, List, Union

from core.models import ChatMessage, MessageKind

LOGGER = logging.getLogger(__name__)

FilterPredicate = Callable[[ChatMessage], Awaitable[bool]]
FilterEntry = Union[str, int, FilterPredicate]


def sender_is(contact_id: Union[str, int]) -> FilterPredicate:
    """Return a predicate matching messages sent by ``contact_id``."""

    expected = str(contact_id)

    async def predicate(message: ChatMessage) -> bool:
        return message.sender is not None and message.sender.id == expected

    predicate.__name__ = f"sender_is_{expected}"
    return predicate


async def is_not_text(message: ChatMessage) -> bool:
    """Match every message that is not plain text."""

    return message.kind is not MessageKind.TEXT


# Predicates that config files can refer to by name.
NAMED_PREDICATES: dict[str, FilterPredicate] = {
    "non_text": is_not_text,
}


def resolve_named_predicate(name: str) -> FilterPredicate:
    """Look up a named predicate, failing loudly on typos."""

    try:
        return NAMED_PREDICATES[name]
    except KeyError:
        raise ValueError(f"Unknown filter predicate: {name}") from None


class FilterChain:
    """Ordered OR of predicates; a message is blocked when any one matches."""

    def __init__(self, predicates: Iterable[FilterPredicate] = ()) -> None:
        self._predicates: List[FilterPredicate] = list(predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    async def blocks(self, message: ChatMessage) -> bool:
        for predicate in self._predicates:
            try:
                if await predicate(message):
                    return True
            except Exception:
                # A broken predicate must not leak messages it was meant to stop.
                LOGGER.exception(
                    "Filter predicate %s failed; treating message as blocked",
                    getattr(predicate, "__name__", predicate),
                )
                return True
        return False


def build_filter_chain(entries: Iterable[FilterEntry]) -> FilterChain:
    """Normalize sender ids and predicates into a uniform chain."""

    predicates: List[FilterPredicate] = []
    for entry in entries:
        if isinstance(entry, (str, int)):
            predicates.append(sender_is(entry))
        elif callable(entry):
            predicates.append(entry)
        else:
            raise ValueError(f"Unsupported filter entry: {entry!r}")
    return FilterChain(predicates)
