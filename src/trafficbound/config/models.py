from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping


class HeuristicType(str, Enum):
    SUBADDITIVE = "subadditive"
    LOOP = "loop"
    RESCALE = "rescale"


class OutputFormat(str, Enum):
    DISCODNC = "discodnc"
    PLOTLY = "plotly"


@dataclass(frozen=True, slots=True)
class HeuristicConfig:
    heuristic: HeuristicType = HeuristicType.SUBADDITIVE
    threshold: int = 0  # 0 picks 4x the longest block period
    num_blocks: int = 0  # 0 picks as many successive blocks as fit, at most 8


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    source_path: Path
    heuristic: HeuristicConfig = field(default_factory=HeuristicConfig)
    output_format: OutputFormat = OutputFormat.DISCODNC
    output_path: Path | None = None
    verbose: bool = False
    benchmark_iterations: int = 1
    plot_horizon: int = 0
    run_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = ""

    @property
    def benchmark(self) -> bool:
        return self.benchmark_iterations > 1

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "run_id": self.run_id or "",
            "created_at": self.created_at.isoformat(),
            "source_path": str(self.source_path),
            "output_format": self.output_format.value,
            "output_path": str(self.output_path) if self.output_path else "",
            "verbose": self.verbose,
            "benchmark_iterations": self.benchmark_iterations,
            "plot_horizon": self.plot_horizon,
            "notes": self.notes,
            "heuristic": {
                "type": self.heuristic.heuristic.value,
                "threshold": self.heuristic.threshold,
                "num_blocks": self.heuristic.num_blocks,
            },
        }
