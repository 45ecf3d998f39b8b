from __future__ import annotations

from fractions import Fraction

import pytest
from hypothesis import given, settings, strategies as st

from trafficbound.config import HeuristicConfig, HeuristicType
from trafficbound.graph import Block, GraphBuilder, ProtocolGraph, fully_connect, rescale
from trafficbound.heuristics import (
    approximate_most_efficient_loop,
    approximate_subadditive,
    approximate_tightest_loop,
    divide_traffic_between_prefix_and_suffix,
    function_for,
    resolve_horizon,
    resolve_num_blocks,
    resolve_threshold,
    split_traffic_between_prefix_and_suffix,
)


@st.composite
def protocol_graphs(draw: st.DrawFn) -> ProtocolGraph:
    """Small graphs where every block can hand over to the traffic-carrying ``b0``."""
    count = draw(st.integers(min_value=1, max_value=3))
    builder = GraphBuilder()
    for idx in range(count):
        label = f"b{idx}"
        period = draw(st.integers(min_value=1, max_value=8))
        builder.add_block(label, period)
        offsets = sorted(draw(st.lists(st.integers(min_value=0, max_value=period - 1), min_size=int(idx == 0), max_size=3)))
        for m, offset in enumerate(offsets):
            builder.add_message(label, f"{label}m{m}", offset, draw(st.integers(min_value=int(idx == 0), max_value=4)))
        builder.add_edge(label, "b0")
    links = st.tuples(st.integers(min_value=0, max_value=count - 1), st.integers(min_value=0, max_value=count - 1))
    for source, target in draw(st.lists(links, max_size=4)):
        builder.add_edge(f"b{source}", f"b{target}")
    return builder.build()


def test_subadditive_is_exact_below_threshold(ring_graph: ProtocolGraph) -> None:
    f = approximate_subadditive(ring_graph, 40)
    assert (f.period_begin, f.period_length, f.period_increment) == (0, 40, ring_graph.max_traffic(40))
    for t in range(0, 41):
        assert f.get_value(t) == ring_graph.max_traffic(t)


def test_subadditive_is_sound(ring_graph: ProtocolGraph) -> None:
    f = approximate_subadditive(ring_graph, 25)
    curve = f.concave_hull()
    assert curve.is_concave()
    for t in range(0, 150):
        traffic = ring_graph.max_traffic(t)
        assert f.get_value(t) >= traffic
        assert curve.f(t) >= traffic


def test_subadditive_needs_positive_threshold(ring_graph: ProtocolGraph) -> None:
    with pytest.raises(ValueError):
        approximate_subadditive(ring_graph, 0)


def test_most_efficient_loop_is_sound(ring_graph: ProtocolGraph) -> None:
    fc = fully_connect(ring_graph, 1)
    f = approximate_most_efficient_loop(fc)
    assert (f.period_begin, f.period_length, f.period_increment) == (20, 1, Fraction(1))
    assert split_traffic_between_prefix_and_suffix(fc) >= fc.max_traffic(20)
    curve = f.concave_hull()
    assert curve.is_concave()
    for t in range(0, 120):
        assert f.get_value(t) >= fc.max_traffic(t) >= ring_graph.max_traffic(t)
        assert curve.f(t) >= fc.max_traffic(t)


def test_loop_needs_fully_connected_graph(ring_graph: ProtocolGraph) -> None:
    with pytest.raises(ValueError):
        approximate_most_efficient_loop(ring_graph)
    with pytest.raises(ValueError):
        approximate_tightest_loop(fully_connect(ring_graph, 1))


def test_tightest_loop_is_sound(ring_graph: ProtocolGraph) -> None:
    rescaled = rescale(fully_connect(ring_graph, 1))
    f = approximate_tightest_loop(rescaled)
    assert (f.period_begin, f.period_length, f.period_increment) == (12, 6, 10)
    assert f.valid_up_to == 17
    curve = f.concave_hull()
    assert curve.is_concave()
    for t in range(0, 120):
        assert f.get_value(t) >= rescaled.max_traffic(t) >= ring_graph.max_traffic(t)
        assert curve.f(t) >= rescaled.max_traffic(t)


def test_divide_traffic_never_exceeds_max_traffic(ring_graph: ProtocolGraph) -> None:
    rescaled = rescale(fully_connect(ring_graph, 1))
    for t in range(0, 13):
        assert divide_traffic_between_prefix_and_suffix(rescaled, t) <= rescaled.max_traffic(t)
    with pytest.raises(ValueError):
        divide_traffic_between_prefix_and_suffix(rescaled, 13)


def test_auto_threshold_and_blocks(ring_graph: ProtocolGraph) -> None:
    assert resolve_threshold(HeuristicConfig(), ring_graph) == 40
    assert resolve_threshold(HeuristicConfig(threshold=7), ring_graph) == 7
    assert resolve_num_blocks(HeuristicConfig(HeuristicType.LOOP), ring_graph) == 8
    assert resolve_num_blocks(HeuristicConfig(HeuristicType.LOOP, num_blocks=3), ring_graph) == 3

    huge = ProtocolGraph([Block("long", 10_000_000_000), Block("short", 3_000_000_000)])
    assert resolve_num_blocks(HeuristicConfig(HeuristicType.LOOP), huge) == 2
    assert resolve_num_blocks(HeuristicConfig(HeuristicType.RESCALE), huge) == 6


def test_horizon(ring_graph: ProtocolGraph) -> None:
    f = approximate_subadditive(ring_graph, 15)
    assert resolve_horizon(HeuristicConfig(threshold=15), f) == 30
    assert resolve_horizon(HeuristicConfig(), f) == 45


def test_dispatch(ring_graph: ProtocolGraph) -> None:
    sub = function_for(HeuristicConfig(HeuristicType.SUBADDITIVE, threshold=20), ring_graph)
    assert (sub.period_begin, sub.period_length) == (0, 20)
    loop = function_for(HeuristicConfig(HeuristicType.LOOP, num_blocks=1), ring_graph)
    assert (loop.period_begin, loop.period_length) == (20, 1)
    tight = function_for(HeuristicConfig(HeuristicType.RESCALE, num_blocks=1), ring_graph)
    assert (tight.period_begin, tight.period_length) == (12, 6)


def test_empty_blocks_in_fully_connected_graph() -> None:
    graph = (
        GraphBuilder()
        .add_block("b0", 3)
        .add_block("b1", 2)
        .add_block("b2", 2)
        .add_message("b0", "m", 0, 1)
        .add_edge("b0", "b1")
        .add_edge("b1", "b2")
        .add_edge("b2", "b0")
        .build()
    )
    fc = fully_connect(graph, 1)
    f = approximate_most_efficient_loop(fc)
    tight = approximate_tightest_loop(rescale(fc))
    for t in range(0, 40):
        assert f.get_value(t) >= fc.max_traffic(t) >= graph.max_traffic(t)
        assert tight.get_value(t) >= graph.max_traffic(t)


@settings(max_examples=40, deadline=None)
@given(protocol_graphs(), st.sampled_from(list(HeuristicType)))
def test_heuristics_bound_random_graphs(graph: ProtocolGraph, heuristic: HeuristicType) -> None:
    function = function_for(HeuristicConfig(heuristic, num_blocks=2), graph)
    curve = function.concave_hull()
    assert curve.is_concave()
    for t in range(0, 60):
        value = function.get_value(t)
        assert value >= graph.max_traffic(t)
        assert curve.f(t) >= value
