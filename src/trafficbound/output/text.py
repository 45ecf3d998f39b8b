from __future__ import annotations

from typing import Sequence

from trafficbound.curves import ArrivalCurve
from trafficbound.output.series import Point


def render_discodnc(curve: ArrivalCurve) -> str:
    """Curve in DiscoDNC notation: ``{(x,y),slope;!(x,y),slope;...}``."""
    return str(curve)


def render_steps(title: str, steps: Sequence[Point]) -> str:
    lines = [f"# {title}"]
    lines.extend(f"{time}\t{value}" for time, value in steps)
    return "\n".join(lines)
