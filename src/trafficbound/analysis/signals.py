from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from trafficbound.curves import ArrivalCurve
from trafficbound.graph import ProtocolGraph


@dataclass(frozen=True, slots=True)
class SignalPoint:
    x: float
    label: str
    detail: str


def bound_frame(graph: ProtocolGraph, curve: ArrivalCurve, times: Iterable[int]) -> pd.DataFrame:
    rows = []
    for time in times:
        traffic = graph.max_traffic(time)
        bound = curve.f(time)
        rows.append(
            {
                "time": time,
                "traffic": float(traffic),
                "bound": float(bound),
                "slack": float(bound - traffic),
                "sound": bound >= traffic,
            }
        )
    return pd.DataFrame(rows, columns=["time", "traffic", "bound", "slack", "sound"])


def soundness_violations(graph: ProtocolGraph, curve: ArrivalCurve, times: Iterable[int]) -> list[SignalPoint]:
    frame = bound_frame(graph, curve, times)
    points: list[SignalPoint] = []
    if frame.empty:
        return points
    for _, row in frame[~frame["sound"]].iterrows():
        points.append(
            SignalPoint(
                float(row["time"]),
                "underestimate",
                f"curve {row['bound']:g} < traffic {row['traffic']:g}",
            )
        )
    return points


def concavity_breaks(curve: ArrivalCurve) -> list[SignalPoint]:
    points: list[SignalPoint] = []
    segments = list(curve)[1:]
    for before, after in zip(segments, segments[1:]):
        if after.slope > before.slope:
            points.append(
                SignalPoint(
                    float(after.x),
                    "slope_increase",
                    f"slope rises from {float(before.slope):g} to {float(after.slope):g}",
                )
            )
    return points
