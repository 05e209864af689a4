"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

ONE_TO_MANY = "one_to_many"
MANY_TO_ONE = "many_to_one"
MANY_TO_MANY = "many_to_many"
TOPOLOGY_TYPES = (ONE_TO_MANY, MANY_TO_ONE, MANY_TO_MANY)


@dataclass(frozen=True)
class TopologyConfig:
    """One routing topology instance."""

    name: str
    type: str
    many: Tuple[str, ...]
    one: Optional[str] = None
    primary: Optional[str] = None
    mapper: Optional[str] = None
    blacklist: Tuple[str, ...] = ()
    filters: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RelayConfig:
    """Everything needed to build the relay, fixed once at startup."""

    headquarters: Optional[str]
    short_name_pattern: str
    topologies: Tuple[TopologyConfig, ...] = field(default_factory=tuple)
