from __future__ import annotations

import logging
from pathlib import Path

import networkx as nx
import pydot

from trafficbound.errors import GraphFormatError
from trafficbound.graph import GraphBuilder, ProtocolGraph

logger = logging.getLogger(__name__)

BLOCK_TYPE = "Block"
MESSAGE_TYPE = "TMsg"


def read_protocol_graph(path: Path | str) -> ProtocolGraph:
    path = Path(path)
    logger.debug("Reading protocol description from %s", path)
    return parse_protocol_graph(path.read_text(encoding="utf-8"))


def parse_protocol_graph(text: str) -> ProtocolGraph:
    """Build a protocol graph from a DOT description.

    Messages form chains ``m1 -> m2 -> ... -> B`` that end in the block they
    belong to, so the message furthest from ``B`` comes first. A block links
    either to itself or to the first message of each successor block.
    """
    raw = _load(text)
    kinds = {node: _node_type(raw, node) for node in raw.nodes}
    blocks = [node for node, kind in kinds.items() if kind == BLOCK_TYPE]

    builder = GraphBuilder()
    for block in blocks:
        _check_block_inputs(raw, kinds, block)
        builder.add_block(block, _int_attr(raw, block, "tPeriod"))

    chains: dict[str, dict[int, str]] = {block: {} for block in blocks}
    owner: dict[str, str] = {}
    for message in (node for node, kind in kinds.items() if kind == MESSAGE_TYPE):
        block, distance = _follow_chain(raw, kinds, message)
        slots = chains[block]
        if distance in slots:
            raise GraphFormatError(f"Messages {slots[distance]} and {message} share a position before block {block}")
        slots[distance] = message
        owner[message] = block

    for block, slots in chains.items():
        if sorted(slots) != list(range(len(slots))):
            raise GraphFormatError(f"Message chain of block {block} is not contiguous")
        for distance in sorted(slots, reverse=True):
            message = slots[distance]
            size = _int_attr(raw, message, "size") if "size" in raw.nodes[message] else 1
            builder.add_message(block, message, _int_attr(raw, message, "tOffs"), size)

    for block in blocks:
        for _, target in raw.out_edges(block):
            if target == block:
                builder.add_edge(block, block)
                continue
            successor = owner[target]
            slots = chains[successor]
            if slots[len(slots) - 1] != target:
                raise GraphFormatError(f"Block '{block}' points into middle of block '{successor}' (-> '{target}')")
            builder.add_edge(block, successor)

    graph = builder.build()
    logger.debug("Parsed %s blocks", graph.block_count)
    return graph


def _load(text: str) -> nx.MultiDiGraph:
    try:
        parsed = pydot.graph_from_dot_data(text)
    except Exception as exc:
        raise GraphFormatError(f"Unreadable DOT description: {exc}") from exc
    if not parsed:
        raise GraphFormatError("Unreadable DOT description")
    graph = nx.nx_pydot.from_pydot(parsed[0])
    if not graph.is_directed():
        raise GraphFormatError("Protocol description must be a digraph")
    return nx.MultiDiGraph(graph)


def _attr(raw: nx.MultiDiGraph, node: str, name: str) -> str:
    try:
        value = raw.nodes[node][name]
    except KeyError:
        raise GraphFormatError(f"Attribute named '{name}' not found in node '{node}'") from None
    return str(value).strip('"')


def _int_attr(raw: nx.MultiDiGraph, node: str, name: str) -> int:
    value = _attr(raw, node, name)
    try:
        return int(value)
    except ValueError:
        raise GraphFormatError(f"Attribute '{name}' of node '{node}' is not an integer: {value}") from None


def _node_type(raw: nx.MultiDiGraph, node: str) -> str:
    kind = _attr(raw, node, "type")
    if kind not in (BLOCK_TYPE, MESSAGE_TYPE):
        raise GraphFormatError(f"Unsupported node type '{kind}' of node '{node}'")
    return kind


def _check_block_inputs(raw: nx.MultiDiGraph, kinds: dict[str, str], block: str) -> None:
    incoming = 0
    for source, _ in raw.in_edges(block):
        # self links stand for a link to the block's own first message
        if source == block:
            continue
        if kinds[source] == BLOCK_TYPE:
            raise GraphFormatError(f"Block to block link: {source} -> {block}")
        incoming += 1
    if incoming != 1:
        raise GraphFormatError(f"Invalid incoming edge count for block type vertex {block} ({incoming})")


def _follow_chain(raw: nx.MultiDiGraph, kinds: dict[str, str], message: str) -> tuple[str, int]:
    current = message
    distance = -1
    seen: set[str] = set()
    while kinds[current] != BLOCK_TYPE:
        if current in seen:
            raise GraphFormatError(f"Message chain starting at {message} never reaches a block")
        seen.add(current)
        out_degree = raw.out_degree(current)
        if out_degree != 1:
            raise GraphFormatError(f"Invalid outgoing edge count for msg type vertex {current} ({out_degree})")
        distance += 1
        current = next(iter(raw.successors(current)))
    return current, distance
