from __future__ import annotations

import pandas as pd

from trafficbound.analysis import bound_frame, compare_curves, concavity_breaks, curve_summary, soundness_violations
from trafficbound.curves import ArrivalCurve, segment
from trafficbound.graph import ProtocolGraph
from trafficbound.heuristics import approximate_subadditive


def _frame(rows: list[tuple[float, float, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"idx": idx, "x": x, "y": y, "slope": slope, "left_open": idx > 0} for idx, (x, y, slope) in enumerate(rows)]
    )


def test_curve_summary() -> None:
    summary = curve_summary(_frame([(0, 0, 0), (0, 5, 2), (3, 11, 0.5)]))
    assert summary == {"burst": 5.0, "rate": 0.5, "segments": 3}


def test_compare_curves_flags_looser_candidate() -> None:
    base = _frame([(0, 0, 0), (0, 4, 1)])
    looser = _frame([(0, 0, 0), (0, 6, 1.5)])
    regressions = compare_curves(base, looser)
    assert [r.metric for r in regressions] == ["burst", "rate"]
    assert regressions[0].delta_pct == 50.0
    assert compare_curves(looser, base) == []
    assert compare_curves(base, pd.DataFrame()) == []


def test_subadditive_curve_has_no_violations(ring_graph: ProtocolGraph) -> None:
    curve = approximate_subadditive(ring_graph, 30).concave_hull()
    assert soundness_violations(ring_graph, curve, range(100)) == []
    frame = bound_frame(ring_graph, curve, range(10))
    assert list(frame.columns) == ["time", "traffic", "bound", "slack", "sound"]
    assert bool(frame["sound"].all())


def test_low_curve_is_reported(ring_graph: ProtocolGraph) -> None:
    curve = ArrivalCurve.from_segments([segment(0, 1, 0, True)])
    violations = soundness_violations(ring_graph, curve, range(5))
    assert [v.x for v in violations] == [1.0, 2.0, 3.0, 4.0]
    assert all(v.label == "underestimate" for v in violations)


def test_concavity_breaks() -> None:
    curve = ArrivalCurve.from_segments([segment(0, 1, 1, True), segment(2, 3, 2, True), segment(4, 7, 1, True)])
    breaks = concavity_breaks(curve)
    assert [b.x for b in breaks] == [2.0]
    assert not curve.is_concave()
