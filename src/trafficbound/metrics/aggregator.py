from __future__ import annotations

from typing import Iterable

import numpy as np

from trafficbound.metrics.models import BenchmarkSample, BenchmarkStats


def aggregate_benchmarks(samples: Iterable[BenchmarkSample]) -> BenchmarkStats:
    durations = np.array([s.seconds for s in samples], dtype=float)
    if durations.size == 0:
        return BenchmarkStats(0, 0.0, 0.0, 0.0, 0.0, 0.0)
    # sample standard deviation, undefined for a single run
    std = float(np.std(durations, ddof=1)) if durations.size > 1 else 0.0
    return BenchmarkStats(
        iterations=int(durations.size),
        mean_sec=float(np.mean(durations)),
        std_sec=std,
        median_sec=float(np.median(durations)),
        min_sec=float(np.min(durations)),
        max_sec=float(np.max(durations)),
    )
