from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True, slots=True)
class Regression:
    metric: str
    delta_pct: float
    message: str


def curve_summary(segments: pd.DataFrame) -> dict[str, float]:
    """Burst and long-term rate of a stored curve (one row per segment)."""
    if segments.empty:
        return {"burst": 0.0, "rate": 0.0, "segments": 0}
    ordered = segments.sort_values("idx")
    at_zero = ordered[ordered["x"] == 0]
    burst = float(at_zero["y"].max()) if not at_zero.empty else 0.0
    return {
        "burst": burst,
        "rate": float(ordered["slope"].iloc[-1]),
        "segments": int(len(ordered)),
    }


def _delta_pct(base: float, candidate: float) -> float:
    if base > 0:
        return (candidate - base) / base * 100
    return math.inf


def compare_curves(base: pd.DataFrame, candidate: pd.DataFrame) -> list[Regression]:
    regressions: list[Regression] = []
    if base.empty or candidate.empty:
        return regressions
    base_summary = curve_summary(base)
    cand_summary = curve_summary(candidate)
    if cand_summary["burst"] > base_summary["burst"]:
        regressions.append(
            Regression(
                metric="burst",
                delta_pct=_delta_pct(base_summary["burst"], cand_summary["burst"]),
                message="candidate curve admits a larger burst",
            )
        )
    if cand_summary["rate"] > base_summary["rate"]:
        regressions.append(
            Regression(
                metric="rate",
                delta_pct=_delta_pct(base_summary["rate"], cand_summary["rate"]),
                message="candidate curve has a higher long-term rate",
            )
        )
    return regressions
