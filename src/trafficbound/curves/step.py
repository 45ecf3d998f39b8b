from __future__ import annotations

from bisect import bisect_right
from fractions import Fraction
from typing import Sequence, Union

from trafficbound.errors import MonotonicityViolationError, NoSuchBoundError, OutOfOrderError, UndefinedValueError

Traffic = Union[int, Fraction]


class StepFunction:
    """Monotone step function stored as its increment points.

    ``times`` is strictly increasing, ``values`` is strictly increasing and
    ``values[i]`` holds from ``times[i]`` until the next increment. The
    function is 0 before the first increment and is only defined up to
    ``valid_up_to``; it can be extended forward but never rewritten.
    """

    __slots__ = ("_times", "_values", "_valid_up_to")

    def __init__(self) -> None:
        self._times: list[int] = []
        self._values: list[Traffic] = []
        self._valid_up_to = 0

    @property
    def times(self) -> Sequence[int]:
        return tuple(self._times)

    @property
    def values(self) -> Sequence[Traffic]:
        return tuple(self._values)

    @property
    def valid_up_to(self) -> int:
        return self._valid_up_to

    def __len__(self) -> int:
        return len(self._times)

    def set_value_at(self, time: int, value: Traffic) -> None:
        if not self._times:
            if time < self._valid_up_to:
                raise OutOfOrderError(time, self._valid_up_to)
            self._times.append(time)
            self._values.append(value)
            self._valid_up_to = time
            return
        if time < self._valid_up_to:
            raise OutOfOrderError(time, self._valid_up_to)
        if value < self._values[-1]:
            raise MonotonicityViolationError(time, value, self._values[-1])
        if time == self._times[-1]:
            self._values[-1] = value
            return
        self._valid_up_to = time
        if value == self._values[-1]:
            return
        self._times.append(time)
        self._values.append(value)

    def extend_to(self, time: int) -> None:
        if time > self._valid_up_to:
            self._valid_up_to = time

    def get_value(self, time: int) -> Traffic:
        if time > self._valid_up_to:
            raise UndefinedValueError(time, self._valid_up_to)
        idx = bisect_right(self._times, time)
        if idx == 0:
            return 0
        return self._values[idx - 1]

    def maximum_value(self) -> Traffic:
        if not self._values:
            return 0
        return self._values[-1]

    def last_step_time(self) -> int:
        if not self._times:
            raise NoSuchBoundError("No step in function")
        return self._times[-1]

    def next_increment_time_after(self, time: int) -> int:
        last = self.last_step_time()
        if time >= last:
            raise NoSuchBoundError(f"No increment time after {time} (last step at {last})")
        return self._times[bisect_right(self._times, time)]

    def first_time_exceeding(self, value: Traffic) -> int:
        maximum = self.maximum_value()
        if not self._values or value >= maximum:
            raise NoSuchBoundError(f"No value above {value} (fn max value: {maximum})")
        return self._times[bisect_right(self._values, value)]

    def maximum_interval(self, length: int, latest_start: int) -> Traffic:
        """Largest increase over any window of ``length`` starting at an increment no later than ``latest_start``.

        The heaviest window of a fixed length always opens right at an
        increment, so only those start points are visited.
        """
        if length < 0:
            raise ValueError(f"Negative interval: {length}")
        best: Traffic = 0
        for idx, start in enumerate(self._times):
            if start > latest_start:
                break
            before = self._values[idx - 1] if idx > 0 else 0
            traffic = self.get_value(start + length - 1) - before
            if traffic > best:
                best = traffic
        return best
