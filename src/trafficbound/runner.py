from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable

from trafficbound.config import AnalysisConfig
from trafficbound.curves import ArrivalCurve, PseudoPeriodicFunction
from trafficbound.graph import ProtocolGraph
from trafficbound.heuristics import function_for, resolve_horizon
from trafficbound.metrics import BenchmarkSample, BenchmarkStats, aggregate_benchmarks
from trafficbound.parser import read_protocol_graph
from trafficbound.storage import Storage

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    run_id: str
    graph: ProtocolGraph
    function: PseudoPeriodicFunction
    curve: ArrivalCurve
    horizon: int
    samples: list[BenchmarkSample]
    stats: BenchmarkStats


def _new_run_id() -> str:
    return uuid.uuid4().hex


def run_analysis(
    config: AnalysisConfig,
    storage: Storage | None = None,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    run_id = config.run_id or _new_run_id()
    if storage is not None and storage.run_exists(run_id):
        msg = f"Run {run_id} already exists"
        raise ValueError(msg)
    iterations = max(1, config.benchmark_iterations)

    samples: list[BenchmarkSample] = []
    for iteration in range(iterations):
        started = time.perf_counter()
        graph, function, curve = _analyse(config)
        elapsed = time.perf_counter() - started
        samples.append(BenchmarkSample(run_id=run_id, iteration=iteration, seconds=elapsed))
        logger.debug("Iteration %s took %.3fs", iteration, elapsed)
        if progress:
            progress(iteration + 1, iterations)

    horizon = config.plot_horizon or resolve_horizon(config.heuristic, function)
    stats = aggregate_benchmarks(samples)
    if storage is not None:
        storage.save_run(config, run_id, function, curve, samples if config.benchmark else ())
    return AnalysisResult(
        run_id=run_id,
        graph=graph,
        function=function,
        curve=curve,
        horizon=horizon,
        samples=samples,
        stats=stats,
    )


def _analyse(config: AnalysisConfig) -> tuple[ProtocolGraph, PseudoPeriodicFunction, ArrivalCurve]:
    graph = read_protocol_graph(config.source_path)
    function = function_for(config.heuristic, graph)
    logger.debug("Approximation created")
    curve = function.concave_hull()
    return graph, function, curve
