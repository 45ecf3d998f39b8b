from __future__ import annotations

import math
from fractions import Fraction

import pytest

from trafficbound.errors import BlockNotFoundError, GraphFormatError, InvalidMessageError
from trafficbound.graph import Block, GraphBuilder, GraphKind, ProtocolGraph


def test_builder_wires_blocks(ring_graph: ProtocolGraph) -> None:
    assert ring_graph.kind is GraphKind.PROTOCOL
    assert ring_graph.block_count == 2
    assert "A" in ring_graph
    a = ring_graph.get_block("A")
    b = ring_graph.get_block("B")
    assert [m.label for m in a] == ["m1", "m2"]
    assert [m.offset for m in a] == [1, 2]
    assert a.next_blocks == (b,)
    assert set(b.next_blocks) == {a, b}
    assert set(b.previous_blocks) == {a, b}


def test_graph_wide_queries(ring_graph: ProtocolGraph) -> None:
    assert ring_graph.max_traffic(0) == 0
    assert ring_graph.max_traffic(1) == 6
    assert ring_graph.max_traffic(2) == 10
    assert ring_graph.first_time_exceeding(0) == 1
    assert ring_graph.first_time_exceeding(6) == 2
    assert ring_graph.longest_block_length() == 10
    assert ring_graph.shortest_block_length() == 6
    assert ring_graph.highest_block_traffic() == 10
    assert ring_graph.highest_average_block_traffic() == Fraction(1)
    assert ring_graph.max_prefix(3) == 10
    assert ring_graph.max_suffix(1) == 0
    assert ring_graph.max_suffix(8) == 6


def test_unknown_block(ring_graph: ProtocolGraph) -> None:
    with pytest.raises(BlockNotFoundError):
        ring_graph.get_block("missing")
    with pytest.raises(KeyError):
        ring_graph.get_block("missing")


def test_empty_graph_is_graceful() -> None:
    graph = ProtocolGraph([])
    assert graph.max_traffic(10) == 0
    assert graph.max_prefix(10) == 0
    assert graph.max_suffix(10) == 0
    assert graph.first_time_exceeding(0) == math.inf
    assert graph.longest_block_length() == 0
    assert graph.highest_average_block_traffic() == 0


def test_duplicate_labels_rejected() -> None:
    with pytest.raises(GraphFormatError):
        ProtocolGraph([Block("A", 1), Block("A", 2)])
    with pytest.raises(GraphFormatError):
        GraphBuilder().add_block("A", 1).add_block("A", 2)


def test_builder_rejects_unknown_labels() -> None:
    builder = GraphBuilder().add_block("A", 4)
    with pytest.raises(BlockNotFoundError):
        builder.add_message("B", "m", 0)
    with pytest.raises(BlockNotFoundError):
        builder.add_edge("A", "B")


def test_builder_reports_bad_messages() -> None:
    builder = GraphBuilder().add_block("A", 4).add_message("A", "m", 4)
    with pytest.raises(InvalidMessageError):
        builder.build()
