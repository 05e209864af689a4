"""Build room connectors from configuration.

Parsing stays outside the core: this module turns the raw JSON entries into
core config dataclasses, then wires topologies, mappers and filter chains
into ready-to-use connectors.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from core.config import (
    MANY_TO_MANY,
    MANY_TO_ONE,
    ONE_TO_MANY,
    TOPOLOGY_TYPES,
    RelayConfig,
    TopologyConfig,
)
from core.connector import RoomConnector
from core.filters import FilterEntry, build_filter_chain, resolve_named_predicate
from core.mappers import BidirectionalMapper, MessageMapper, UnidirectionalMapper
from core.names import DEFAULT_SHORT_NAME_PATTERN, NameResolver
from core.ports import TransportPort
from core.topology import ManyToMany, ManyToOne, OneToMany, Topology

LOGGER = logging.getLogger(__name__)

UNIDIRECTIONAL = "unidirectional"
BIDIRECTIONAL = "bidirectional"


def _parse_topology(entry: dict, position: int) -> TopologyConfig:
    name = entry.get("name") or f"topology-{position}"
    kind = entry.get("type")
    if kind not in TOPOLOGY_TYPES:
        raise ValueError(f"{name}: unsupported topology type: {kind}")

    many = tuple(str(room) for room in entry.get("many", []) or [])
    if not many:
        raise ValueError(f"{name}: 'many' must list at least one room")

    one = entry.get("one")
    if kind in (ONE_TO_MANY, MANY_TO_ONE) and not one:
        raise ValueError(f"{name}: '{kind}' requires 'one'")

    mapper = entry.get("mapper")
    if mapper is not None and mapper not in (UNIDIRECTIONAL, BIDIRECTIONAL):
        raise ValueError(f"{name}: unsupported mapper: {mapper}")

    filters = tuple(entry.get("filters", []) or [])
    for filter_name in filters:
        resolve_named_predicate(filter_name)

    return TopologyConfig(
        name=name,
        type=kind,
        many=many,
        one=str(one) if one else None,
        primary=entry.get("primary"),
        mapper=mapper,
        blacklist=tuple(str(sender) for sender in entry.get("blacklist", []) or []),
        filters=filters,
    )


def build_relay_config(
    topologies: Iterable[dict],
    headquarters: Optional[str] = None,
    blacklist: Iterable[str] = (),
    short_name_pattern: str = DEFAULT_SHORT_NAME_PATTERN,
) -> RelayConfig:
    """Validate raw config entries into an immutable RelayConfig.

    The global blacklist is folded into every topology ahead of its own.
    """

    global_blacklist = tuple(str(sender) for sender in blacklist)
    parsed: List[TopologyConfig] = []
    for position, entry in enumerate(topologies, start=1):
        if not entry.get("enabled", True):
            continue
        topology = _parse_topology(entry, position)
        if global_blacklist:
            merged = global_blacklist + tuple(s for s in topology.blacklist if s not in global_blacklist)
            topology = replace(topology, blacklist=merged)
        parsed.append(topology)

    return RelayConfig(
        headquarters=str(headquarters) if headquarters else None,
        short_name_pattern=short_name_pattern,
        topologies=tuple(parsed),
    )


def _build_topology(config: TopologyConfig) -> Topology:
    if config.type == ONE_TO_MANY:
        return OneToMany(one=config.one, many=config.many)
    if config.type == MANY_TO_ONE:
        return ManyToOne(one=config.one, many=config.many)
    return ManyToMany(many=config.many)


def _build_mapper(config: TopologyConfig, names: NameResolver, headquarters: Optional[str]) -> MessageMapper:
    mapper = config.mapper
    if mapper is None:
        mapper = BIDIRECTIONAL if config.type == MANY_TO_MANY else UNIDIRECTIONAL
    if mapper == BIDIRECTIONAL:
        return BidirectionalMapper(names)
    return UnidirectionalMapper(names, config.primary or headquarters)


def build_connectors(
    relay_config: RelayConfig,
    names: NameResolver,
    transport: TransportPort,
) -> List[RoomConnector]:
    """Create one connector per configured topology."""

    connectors: List[RoomConnector] = []
    for config in relay_config.topologies:
        entries: List[FilterEntry] = list(config.blacklist)
        entries.extend(resolve_named_predicate(filter_name) for filter_name in config.filters)
        connector = RoomConnector(
            name=config.name,
            topology=_build_topology(config),
            mapper=_build_mapper(config, names, relay_config.headquarters),
            filters=build_filter_chain(entries),
            transport=transport,
        )
        LOGGER.info(
            "Connector %s: %s over %s rooms (%s filters)",
            config.name,
            config.type,
            len(connector.topology.members()),
            len(entries),
        )
        connectors.append(connector)
    return connectors
