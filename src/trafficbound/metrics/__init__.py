from __future__ import annotations

from trafficbound.metrics.aggregator import aggregate_benchmarks
from trafficbound.metrics.models import BenchmarkSample, BenchmarkStats

__all__ = ["BenchmarkSample", "BenchmarkStats", "aggregate_benchmarks"]
