from __future__ import annotations

from trafficbound.heuristics.factory import function_for, resolve_horizon, resolve_num_blocks, resolve_threshold
from trafficbound.heuristics.loop import (
    approximate_most_efficient_loop,
    approximate_tightest_loop,
    divide_traffic_between_prefix_and_suffix,
    split_traffic_between_prefix_and_suffix,
)
from trafficbound.heuristics.subadditive import approximate_subadditive

__all__ = [
    "approximate_most_efficient_loop",
    "approximate_subadditive",
    "approximate_tightest_loop",
    "divide_traffic_between_prefix_and_suffix",
    "function_for",
    "resolve_horizon",
    "resolve_num_blocks",
    "resolve_threshold",
    "split_traffic_between_prefix_and_suffix",
]
