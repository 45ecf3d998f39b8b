from __future__ import annotations

import logging
import math

from trafficbound.curves import PseudoPeriodicFunction, Traffic
from trafficbound.graph import GraphKind, ProtocolGraph

logger = logging.getLogger(__name__)


def _require(graph: ProtocolGraph, *kinds: GraphKind) -> None:
    if graph.kind not in kinds:
        expected = " or ".join(kind.value for kind in kinds)
        raise ValueError(f"Heuristic needs a {expected} graph, got {graph.kind.value}")


def _record_steps(graph: ProtocolGraph, function: PseudoPeriodicFunction, horizon: int) -> None:
    time: int | float = 0
    value: Traffic = 0
    while time < horizon:
        logger.debug("Exact steps %s/%s", time, horizon)
        function.set_value_at(int(time), value)
        time = graph.first_time_exceeding(value)
        if time == math.inf:
            return
        value = graph.max_traffic(int(time))


def approximate_most_efficient_loop(graph: ProtocolGraph) -> PseudoPeriodicFunction:
    """Exact bound below twice the longest period, then growth at the best average block rate."""
    _require(graph, GraphKind.FULLY_CONNECTED, GraphKind.RESCALED)
    horizon = 2 * graph.longest_block_length()
    function = PseudoPeriodicFunction(horizon, 1, graph.highest_average_block_traffic())
    _record_steps(graph, function, horizon)
    function.set_value_at(horizon, split_traffic_between_prefix_and_suffix(graph))
    return function


def split_traffic_between_prefix_and_suffix(graph: ProtocolGraph) -> Traffic:
    """Bound for a window of twice the longest period.

    Such a window is a block suffix, some whole blocks and a block prefix; the
    whole blocks never beat the highest average block rate.
    """
    longest = graph.longest_block_length()
    best: Traffic = 0
    in_suffix: int | float = 0
    while in_suffix < longest:
        logger.debug("Suffix split %s/%s", in_suffix, longest)
        traffic_in_suffix = graph.max_suffix(int(in_suffix))
        best = max(best, traffic_in_suffix + _split_traffic_between_loop_and_prefix(graph, 2 * longest - int(in_suffix)))
        in_suffix = graph.first_time_exceeding_in_suffix(traffic_in_suffix)
    return best


def _split_traffic_between_loop_and_prefix(graph: ProtocolGraph, time: int) -> Traffic:
    average = graph.highest_average_block_traffic()
    best: Traffic = 0
    in_prefix: int | float = 0
    while in_prefix < time:
        traffic_in_prefix = graph.max_prefix(int(in_prefix))
        best = max(best, (time - int(in_prefix)) * average + traffic_in_prefix)
        in_prefix = graph.first_time_exceeding_in_prefix(traffic_in_prefix)
    return best


def approximate_tightest_loop(graph: ProtocolGraph) -> PseudoPeriodicFunction:
    """Bound for a rescaled graph, repeating every common period with the heaviest block on top.

    On a fully connected graph with one common period ``P`` a window of
    ``t + P`` (``t >= P``) always holds one whole block, so its bound is the
    bound of ``t`` plus the heaviest block. The third period is therefore the
    second one shifted up by that block.
    """
    _require(graph, GraphKind.RESCALED)
    length = graph.shortest_block_length()
    highest = graph.highest_block_traffic()
    function = PseudoPeriodicFunction(2 * length, length, highest)
    _record_steps(graph, function, 2 * length)

    second_period = [(t, v) for t, v in zip(function.times, function.values) if length < t < 2 * length]
    function.set_value_at(2 * length, graph.max_traffic(length) + highest)
    for time, value in second_period:
        function.set_value_at(time + length, value + highest)
    function.set_value_at(3 * length - 1, function.get_value(function.valid_up_to))
    return function


def divide_traffic_between_prefix_and_suffix(graph: ProtocolGraph, time: int) -> Traffic:
    """Most traffic in a window of ``time`` crossing exactly one boundary of a rescaled graph."""
    _require(graph, GraphKind.RESCALED)
    length = graph.shortest_block_length()
    if time > 2 * length:
        raise ValueError(f"A window of {time} crosses more than one boundary of blocks of length {length}")
    best: Traffic = 0
    in_prefix: int | float = max(0, time - length)
    while in_prefix <= min(time, length):
        traffic_in_prefix = graph.max_prefix(int(in_prefix))
        best = max(best, graph.max_suffix(time - int(in_prefix)) + traffic_in_prefix)
        in_prefix = graph.first_time_exceeding_in_prefix(traffic_in_prefix)
    return best
