from __future__ import annotations

from trafficbound.curves import ArrivalCurve, PseudoPeriodicFunction, Traffic
from trafficbound.graph import ProtocolGraph

Point = tuple[int, Traffic]


def max_traffic_steps(graph: ProtocolGraph, horizon: int) -> list[Point]:
    steps: list[Point] = [(0, 0)]
    step = graph.first_time_exceeding(0)
    while step <= horizon:
        value = graph.max_traffic(int(step))
        steps.append((int(step), value))
        step = graph.first_time_exceeding(value)
    if steps[-1][0] != horizon:
        steps.append((horizon, graph.max_traffic(horizon)))
    return steps


def function_steps(function: PseudoPeriodicFunction, horizon: int) -> list[Point]:
    """Breakpoints of ``function`` on ``[0, horizon]``, repetitions included."""
    begin = function.period_begin
    length = function.period_length
    recorded = [t for t in function.times if t < begin + length and t <= horizon]
    periodic = {t for t in function.times if begin <= t < begin + length}
    periodic.add(begin)

    times = set(recorded)
    repetition = 1
    while begin + repetition * length <= horizon:
        times.update(t + repetition * length for t in periodic if t + repetition * length <= horizon)
        repetition += 1
    times.add(horizon)
    return [(t, function.get_value(t)) for t in sorted(times)]


def hull_points(curve: ArrivalCurve, horizon: int) -> list[tuple[float, float]]:
    points: list[tuple[float, float]] = []
    segments = list(curve)
    for idx, seg in enumerate(segments):
        end = segments[idx + 1].x if idx + 1 < len(segments) else max(seg.x, horizon)
        points.append((float(seg.x), float(seg.y)))
        points.append((float(end), float(seg.f(end))))
    return points

