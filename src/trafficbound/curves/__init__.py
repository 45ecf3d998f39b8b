from __future__ import annotations

from trafficbound.curves.arrival import ArrivalCurve, LinearSegment, segment
from trafficbound.curves.pseudo_periodic import PseudoPeriodicFunction
from trafficbound.curves.step import StepFunction, Traffic

__all__ = [
    "ArrivalCurve",
    "LinearSegment",
    "PseudoPeriodicFunction",
    "StepFunction",
    "Traffic",
    "segment",
]
