from __future__ import annotations

import logging
import math

from trafficbound.curves import PseudoPeriodicFunction
from trafficbound.errors import TrafficBoundError
from trafficbound.graph import ProtocolGraph

logger = logging.getLogger(__name__)


def approximate_subadditive(graph: ProtocolGraph, threshold: int) -> PseudoPeriodicFunction:
    """Exact bound on ``[0, threshold]``, repeated every ``threshold`` time units.

    Sound because the bound is sub-additive:
    ``max_traffic(t + threshold) <= max_traffic(t) + max_traffic(threshold)``.
    """
    if threshold <= 0:
        raise ValueError(f"Threshold must be positive, got {threshold}")
    if graph.max_traffic(0) != 0:
        raise TrafficBoundError("Interval 0 should always return max traffic 0")

    result = PseudoPeriodicFunction(0, threshold, graph.max_traffic(threshold))
    result.set_value_at(0, 0)
    step = graph.first_time_exceeding(0)
    while step <= threshold:
        value = graph.max_traffic(int(step))
        logger.debug("Subadditive step at %s/%s -> %s", step, threshold, value)
        result.set_value_at(int(step), value)
        step = graph.first_time_exceeding(value)
    if step == math.inf:
        logger.debug("Traffic bound saturates before %s", threshold)

    result.set_value_at(threshold, graph.max_traffic(threshold))
    return result
