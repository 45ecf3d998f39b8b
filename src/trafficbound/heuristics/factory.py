from __future__ import annotations

import logging

from trafficbound.config import HeuristicConfig, HeuristicType
from trafficbound.curves import PseudoPeriodicFunction
from trafficbound.graph import ProtocolGraph, fully_connect, rescale
from trafficbound.heuristics.loop import approximate_most_efficient_loop, approximate_tightest_loop
from trafficbound.heuristics.subadditive import approximate_subadditive

logger = logging.getLogger(__name__)

# Upper bound on the period of a super block picked automatically
SUPER_BLOCK_BUDGET = 20_000_000_000
MAX_AUTO_BLOCKS = 8


def resolve_threshold(config: HeuristicConfig, graph: ProtocolGraph) -> int:
    if config.threshold > 0:
        return config.threshold
    return graph.longest_block_length() * 4


def resolve_num_blocks(config: HeuristicConfig, graph: ProtocolGraph) -> int:
    if config.num_blocks > 0:
        return config.num_blocks
    if config.heuristic is HeuristicType.RESCALE:
        period = graph.shortest_block_length()
    else:
        period = graph.longest_block_length()
    if period <= 0:
        return 1
    return max(1, min(MAX_AUTO_BLOCKS, SUPER_BLOCK_BUDGET // period))


def resolve_horizon(config: HeuristicConfig, function: PseudoPeriodicFunction) -> int:
    if config.threshold > 0:
        return 2 * config.threshold
    return function.period_begin + 3 * function.period_length


def function_for(config: HeuristicConfig, graph: ProtocolGraph) -> PseudoPeriodicFunction:
    if config.heuristic is HeuristicType.SUBADDITIVE:
        threshold = resolve_threshold(config, graph)
        logger.info("Using a threshold of %s", threshold)
        return approximate_subadditive(graph, threshold)
    if config.heuristic is HeuristicType.LOOP:
        num_blocks = resolve_num_blocks(config, graph)
        logger.info("Using %s consecutive blocks", num_blocks)
        return approximate_most_efficient_loop(fully_connect(graph, num_blocks))
    if config.heuristic is HeuristicType.RESCALE:
        num_blocks = resolve_num_blocks(config, graph)
        logger.info("Using %s consecutive blocks", num_blocks)
        return approximate_tightest_loop(rescale(fully_connect(graph, num_blocks)))
    msg = f"Unsupported heuristic: {config.heuristic}"
    raise ValueError(msg)
