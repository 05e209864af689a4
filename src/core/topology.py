"""Routing topologies.

All three shapes share the connector algorithm and differ only in which
rooms a message from a given origin is sent to. Origins are configured room
keys, already normalized by the connector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class OneToMany:
    """One origin room fanned out to many rooms; no reverse flow."""

    one: str
    many: Tuple[str, ...]

    def members(self) -> Tuple[str, ...]:
        return (self.one, *self.many)

    def destinations(self, origin: str) -> Tuple[str, ...]:
        if origin != self.one:
            return ()
        return self.many


@dataclass(frozen=True)
class ManyToOne:
    """Many source rooms collected into one sink room."""

    one: str
    many: Tuple[str, ...]

    def members(self) -> Tuple[str, ...]:
        return (*self.many, self.one)

    def destinations(self, origin: str) -> Tuple[str, ...]:
        if origin not in self.many:
            return ()
        return (self.one,)


@dataclass(frozen=True)
class ManyToMany:
    """Symmetric mesh: every peer relays to every other peer."""

    many: Tuple[str, ...]

    def members(self) -> Tuple[str, ...]:
        return self.many

    def destinations(self, origin: str) -> Tuple[str, ...]:
        if origin not in self.many:
            return ()
        return tuple(room for room in self.many if room != origin)


Topology = Union[OneToMany, ManyToOne, ManyToMany]
