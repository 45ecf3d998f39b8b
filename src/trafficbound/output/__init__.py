from __future__ import annotations

from trafficbound.output.plot import arrival_figure, write_html
from trafficbound.output.series import function_steps, hull_points, max_traffic_steps
from trafficbound.output.text import render_discodnc, render_steps

__all__ = [
    "arrival_figure",
    "function_steps",
    "hull_points",
    "max_traffic_steps",
    "render_discodnc",
    "render_steps",
    "write_html",
]
