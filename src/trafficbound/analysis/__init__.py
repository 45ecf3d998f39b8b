from __future__ import annotations

from trafficbound.analysis.compare import Regression, compare_curves, curve_summary
from trafficbound.analysis.signals import SignalPoint, bound_frame, concavity_breaks, soundness_violations

__all__ = [
    "Regression",
    "SignalPoint",
    "bound_frame",
    "compare_curves",
    "concavity_breaks",
    "curve_summary",
    "soundness_violations",
]
