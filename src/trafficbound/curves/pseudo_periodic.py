from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Sequence

from trafficbound.curves.arrival import ArrivalCurve, LinearSegment, segment
from trafficbound.curves.step import StepFunction, Traffic

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _HullFrame:
    end: int
    floor: Fraction
    start: int
    slope: Fraction
    ceiling: Fraction


class PseudoPeriodicFunction:
    """Step function that repeats with a constant increment once ``period_begin`` is reached.

    For ``t >= period_begin`` the value is ``f(t - r * period_length) + r * period_increment``
    with ``r = (t - period_begin) // period_length``; below ``period_begin + period_length``
    the explicitly recorded steps are used.
    """

    __slots__ = ("period_begin", "period_length", "period_increment", "_initial")

    def __init__(self, period_begin: int, period_length: int, period_increment: Traffic) -> None:
        if period_length <= 0:
            raise ValueError(f"Period length must be positive, got {period_length}")
        if period_increment < 0:
            raise ValueError(f"Period increment must not be negative, got {period_increment}")
        self.period_begin = period_begin
        self.period_length = period_length
        self.period_increment = period_increment
        self._initial = StepFunction()

    @property
    def times(self) -> Sequence[int]:
        return self._initial.times

    @property
    def values(self) -> Sequence[Traffic]:
        return self._initial.values

    @property
    def valid_up_to(self) -> int:
        return self._initial.valid_up_to

    def set_value_at(self, time: int, value: Traffic) -> None:
        self._initial.set_value_at(time, value)

    def get_value(self, time: int) -> Traffic:
        if time < self.period_begin + self.period_length:
            return self._initial.get_value(time)
        repetitions = (time - self.period_begin) // self.period_length
        leftover = time - repetitions * self.period_length
        return self._initial.get_value(leftover) + repetitions * self.period_increment

    def concave_hull(self) -> ArrivalCurve:
        # Traffic recorded at step n was really sent at (n - 1) + epsilon, so every
        # hull vertex sits at n - 1 and every segment is open to the left.
        final_slope = Fraction(self.period_increment) / self.period_length
        points = self._hull_points()

        # The offset point maximises f(x) - x * final_slope; the terminal segment
        # through it lies above every recorded step and every repetition.
        last = 0
        best = points[0][1] - points[0][0] * final_slope
        for idx in range(1, len(points)):
            x, value = points[idx]
            offset = value - x * final_slope
            if offset > best:
                best = offset
                last = idx

        chain = _concave_chain(points, last, final_slope)
        if chain is None:
            logger.warning("Unable to find a concave hull, using a very rough approximation")
            return ArrivalCurve.from_segments([segment(0, best, final_slope, True)])

        chain.append(last)
        segments: list[LinearSegment] = []
        for start, end in zip(chain, chain[1:]):
            x, value = points[start]
            segments.append(segment(x, value, _slope(points, start, end), True))
        x, value = points[last]
        segments.append(segment(x, value, final_slope, True))
        return ArrivalCurve.from_segments(segments)

    def _hull_points(self) -> list[tuple[int, Fraction]]:
        points: list[tuple[int, Fraction]] = []
        for time, value in zip(self._initial.times, self._initial.values):
            x = time - 1 if time > 0 else 0
            if points and points[-1][0] == x:
                points[-1] = (x, Fraction(value))
            else:
                points.append((x, Fraction(value)))
        if not points or points[0][0] != 0:
            points.insert(0, (0, Fraction(0)))
        return points


def _slope(points: Sequence[tuple[int, Fraction]], first: int, second: int) -> Fraction:
    return (points[second][1] - points[first][1]) / (points[second][0] - points[first][0])


def _open_frame(points: Sequence[tuple[int, Fraction]], end: int, floor: Fraction) -> _HullFrame:
    slope = _slope(points, end - 1, end)
    return _HullFrame(end=end, floor=floor, start=end - 1, slope=slope, ceiling=slope)


def _flatten(points: Sequence[tuple[int, Fraction]], frame: _HullFrame) -> bool:
    frame.start -= 1
    if frame.start < 0:
        return False
    if frame.slope <= frame.ceiling:
        frame.ceiling = frame.slope
    frame.slope = _slope(points, frame.start, frame.end)
    return True


def _next_candidate(points: Sequence[tuple[int, Fraction]], frame: _HullFrame) -> bool:
    # A start is usable when its segment does not dip under an intermediate
    # point (slope <= ceiling) and keeps the chain concave (slope >= floor).
    while frame.slope >= frame.floor:
        if frame.slope <= frame.ceiling:
            return True
        if not _flatten(points, frame):
            return False
    return False


def _concave_chain(
    points: Sequence[tuple[int, Fraction]],
    last: int,
    final_slope: Fraction,
) -> list[int] | None:
    """Vertex indices, ascending from 0, of a concave chain ending at ``last``.

    Backtracking search over earlier start points, kept on an explicit stack;
    ``None`` when no chain respects the slope floor all the way back to 0.
    """
    if last == 0:
        return []
    frames = [_open_frame(points, last, final_slope)]
    chain: list[int] | None = None
    returned = False
    while frames:
        frame = frames[-1]
        if returned:
            returned = False
            if chain is not None:
                frames.pop()
                chain.append(frame.start)
                returned = True
                continue
            if not _flatten(points, frame):
                frames.pop()
                returned = True
                continue
        if not _next_candidate(points, frame):
            frames.pop()
            chain = None
            returned = True
            continue
        if frame.start == 0:
            chain = []
            returned = True
            continue
        frames.append(_open_frame(points, frame.start, frame.slope))
    return chain
