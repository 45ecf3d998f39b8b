from __future__ import annotations

from pathlib import Path

import pytest

from trafficbound.errors import GraphFormatError
from trafficbound.graph import ProtocolGraph
from trafficbound.parser import parse_protocol_graph, read_protocol_graph

from conftest import RING_DOT


def test_parse_ring(ring_dot: Path, ring_graph: ProtocolGraph) -> None:
    graph = read_protocol_graph(ring_dot)
    assert graph.block_count == 2
    a = graph.get_block("A")
    b = graph.get_block("B")
    assert a.period == 10
    assert [(m.label, m.offset, m.size) for m in a] == [("m1", 1, 4), ("m2", 2, 6)]
    assert [(m.label, m.offset, m.size) for m in b] == [("m3", 0, 1)]
    assert a.next_blocks == (b,)
    assert set(b.next_blocks) == {a, b}
    for t in range(0, 40):
        assert graph.max_traffic(t) == ring_graph.max_traffic(t)


def test_quoted_attributes() -> None:
    graph = parse_protocol_graph(
        """
        digraph g {
            "m" [type="TMsg", tOffs="3", size="2"];
            "B" [type="Block", tPeriod="5"];
            "m" -> "B";
            "B" -> "B";
        }
        """
    )
    block = graph.get_block("B")
    assert [(m.offset, m.size) for m in block] == [(3, 2)]


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        (RING_DOT.replace("A -> m3;", "A -> B;"), "Block to block link"),
        (RING_DOT.replace("B -> m1;", "B -> m2;"), "points into middle"),
        (RING_DOT.replace("m3 -> B;", "m3 -> B;\n    m3 -> m1;"), "outgoing edge count"),
        (RING_DOT.replace("B [type=Block, tPeriod=6];", "B [type=Queue, tPeriod=6];"), "Unsupported node type"),
        (RING_DOT.replace("B [type=Block, tPeriod=6];", "B [type=Block];"), "tPeriod"),
        (RING_DOT.replace("tOffs=1,", "tOffs=soon,"), "not an integer"),
    ],
)
def test_malformed_descriptions(text: str, fragment: str) -> None:
    with pytest.raises(GraphFormatError, match=fragment):
        parse_protocol_graph(text)


def test_unreadable_text() -> None:
    with pytest.raises(GraphFormatError):
        parse_protocol_graph("this is not dot")
