from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BenchmarkSample:
    run_id: str
    iteration: int
    seconds: float


@dataclass(frozen=True, slots=True)
class BenchmarkStats:
    iterations: int
    mean_sec: float
    std_sec: float
    median_sec: float
    min_sec: float
    max_sec: float
