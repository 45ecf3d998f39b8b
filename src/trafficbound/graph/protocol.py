from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Iterable, Iterator, Mapping

from trafficbound.curves import Traffic
from trafficbound.errors import BlockNotFoundError, GraphFormatError
from trafficbound.graph.block import Block, Time


class GraphKind(str, Enum):
    PROTOCOL = "protocol"
    FULLY_CONNECTED = "fully_connected"
    RESCALED = "rescaled"


class ProtocolGraph:
    """Queryable set of wired blocks, keyed by label."""

    def __init__(self, blocks: Iterable[Block], kind: GraphKind = GraphKind.PROTOCOL) -> None:
        self._blocks: dict[str, Block] = {}
        for block in blocks:
            if block.label in self._blocks:
                raise GraphFormatError(f"Duplicate block label {block.label}")
            self._blocks[block.label] = block
        self.kind = kind

    def __repr__(self) -> str:
        return f"ProtocolGraph(kind={self.kind.value}, blocks={len(self._blocks)})"

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks.values())

    def __contains__(self, label: object) -> bool:
        return label in self._blocks

    @property
    def blocks(self) -> Mapping[str, Block]:
        return dict(self._blocks)

    @property
    def block_count(self) -> int:
        return len(self._blocks)

    def get_block(self, label: str) -> Block:
        try:
            return self._blocks[label]
        except KeyError:
            raise BlockNotFoundError(label) from None

    def max_traffic(self, length: int) -> Traffic:
        return max((b.max_traffic(length) for b in self), default=0)

    def max_prefix(self, time: int) -> Traffic:
        return max((b.max_prefix(time) for b in self), default=0)

    def max_suffix(self, time: int) -> Traffic:
        return max((b.max_suffix(time) for b in self), default=0)

    def first_time_exceeding(self, value: Traffic) -> Time:
        return min((b.shortest_interval_where_max_traffic_exceeds(value) for b in self), default=math.inf)

    def first_time_exceeding_in_prefix(self, value: Traffic) -> Time:
        return min((b.earliest_time_prefix_exceeds(value) for b in self), default=math.inf)

    def first_time_exceeding_in_suffix(self, value: Traffic) -> Time:
        return min((b.earliest_time_suffix_exceeds(value) for b in self), default=math.inf)

    def longest_block_length(self) -> int:
        return max((b.period for b in self), default=0)

    def shortest_block_length(self) -> int:
        return min((b.period for b in self), default=0)

    def highest_block_traffic(self) -> int:
        return max((b.total_traffic for b in self), default=0)

    def highest_average_block_traffic(self) -> Fraction:
        return max((Fraction(b.total_traffic, b.period) for b in self), default=Fraction(0))


@dataclass(slots=True)
class _BlockSpec:
    period: int
    messages: list[tuple[str, int, int]] = field(default_factory=list)


@dataclass(slots=True)
class GraphBuilder:
    """Collects blocks, messages and edges by label, then wires them in one go.

    Messages are attached before any edge so the blocks are complete when the
    graph becomes queryable.
    """

    _blocks: dict[str, _BlockSpec] = field(default_factory=dict)
    _edges: list[tuple[str, str]] = field(default_factory=list)

    def add_block(self, label: str, period: int) -> GraphBuilder:
        if label in self._blocks:
            raise GraphFormatError(f"Duplicate block label {label}")
        self._blocks[label] = _BlockSpec(period)
        return self

    def add_message(self, block: str, label: str, offset: int, size: int = 1) -> GraphBuilder:
        self._spec(block).messages.append((label, offset, size))
        return self

    def add_edge(self, source: str, target: str) -> GraphBuilder:
        self._spec(source)
        self._spec(target)
        self._edges.append((source, target))
        return self

    def build(self) -> ProtocolGraph:
        blocks: dict[str, Block] = {}
        for label, spec in self._blocks.items():
            block = Block(label, spec.period)
            for message_label, offset, size in spec.messages:
                block.add_message(message_label, offset, size)
            blocks[label] = block
        for source, target in self._edges:
            blocks[source].add_next(blocks[target])
        return ProtocolGraph(blocks.values())

    def _spec(self, label: str) -> _BlockSpec:
        try:
            return self._blocks[label]
        except KeyError:
            raise BlockNotFoundError(label) from None
