from __future__ import annotations

from pathlib import Path

import pytest

from trafficbound.graph import GraphBuilder, ProtocolGraph

RING_DOT = """
digraph ring {
    m1 [type=TMsg, tOffs=1, size=4];
    m2 [type=TMsg, tOffs=2, size=6];
    A [type=Block, tPeriod=10];
    m3 [type=TMsg, tOffs=0];
    B [type=Block, tPeriod=6];
    m1 -> m2 -> A;
    A -> m3;
    m3 -> B;
    B -> m1;
    B -> B;
}
"""


def build_ring() -> ProtocolGraph:
    return (
        GraphBuilder()
        .add_block("A", 10)
        .add_block("B", 6)
        .add_message("A", "m1", 1, 4)
        .add_message("A", "m2", 2, 6)
        .add_message("B", "m3", 0)
        .add_edge("A", "B")
        .add_edge("B", "A")
        .add_edge("B", "B")
        .build()
    )


@pytest.fixture
def ring_graph() -> ProtocolGraph:
    return build_ring()


@pytest.fixture
def ring_dot(tmp_path: Path) -> Path:
    path = tmp_path / "ring.dot"
    path.write_text(RING_DOT, encoding="utf-8")
    return path
