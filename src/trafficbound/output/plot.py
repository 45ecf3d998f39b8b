from __future__ import annotations

from pathlib import Path
from typing import Sequence

import plotly.graph_objects as go

from trafficbound.curves import ArrivalCurve, PseudoPeriodicFunction
from trafficbound.graph import ProtocolGraph
from trafficbound.output.series import Point, function_steps, hull_points, max_traffic_steps


def _step_trace(steps: Sequence[Point], name: str) -> go.Scatter:
    return go.Scatter(
        x=[t for t, _ in steps],
        y=[float(v) for _, v in steps],
        name=name,
        mode="lines",
        line=dict(shape="hv"),
    )


def arrival_figure(
    graph: ProtocolGraph | None,
    function: PseudoPeriodicFunction | None,
    curve: ArrivalCurve,
    horizon: int,
) -> go.Figure:
    fig = go.Figure()
    if graph is not None:
        fig.add_trace(_step_trace(max_traffic_steps(graph, horizon), "Actual traffic"))
    if function is not None:
        fig.add_trace(_step_trace(function_steps(function, horizon), "Pseudoperiodic approximation"))
        for x in (function.period_begin, function.period_begin + function.period_length):
            if x <= horizon:
                fig.add_vline(x=x, line_dash="dot", line_color="gray")
    points = hull_points(curve, horizon)
    fig.add_trace(
        go.Scatter(
            x=[x for x, _ in points],
            y=[y for _, y in points],
            name="Concave hull",
            mode="lines",
        )
    )
    fig.update_layout(
        height=400,
        margin=dict(l=10, r=10, t=30, b=10),
        xaxis_title="Interval length",
        yaxis_title="Traffic",
    )
    return fig


def write_html(fig: go.Figure, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(path), include_plotlyjs="cdn")
    return path
