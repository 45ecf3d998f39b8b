from __future__ import annotations

from trafficbound.config.models import AnalysisConfig, HeuristicConfig, HeuristicType, OutputFormat

__all__ = [
    "AnalysisConfig",
    "HeuristicConfig",
    "HeuristicType",
    "OutputFormat",
]
