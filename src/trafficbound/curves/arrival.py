from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterator, Sequence, Union

Number = Union[int, Fraction]


@dataclass(frozen=True, slots=True)
class LinearSegment:
    x: Fraction
    y: Fraction
    slope: Fraction
    left_open: bool = False

    def f(self, x: Number) -> Fraction:
        return self.y + self.slope * (Fraction(x) - self.x)

    def __str__(self) -> str:
        prefix = "!" if self.left_open else ""
        return f"{prefix}({float(self.x)},{float(self.y)}),{float(self.slope)}"


def segment(x: Number, y: Number, slope: Number, left_open: bool = False) -> LinearSegment:
    return LinearSegment(Fraction(x), Fraction(y), Fraction(slope), left_open)


@dataclass(frozen=True, slots=True)
class ArrivalCurve:
    """Piecewise-linear curve; starts with the closed origin segment ``(0, 0)`` of slope 0."""

    segments: Sequence[LinearSegment] = field(default_factory=tuple)

    @classmethod
    def from_segments(cls, segments: Sequence[LinearSegment]) -> ArrivalCurve:
        return cls((segment(0, 0, 0), *segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[LinearSegment]:
        return iter(self.segments)

    def __getitem__(self, idx: int) -> LinearSegment:
        return self.segments[idx]

    @property
    def rate(self) -> Fraction:
        return self.segments[-1].slope if self.segments else Fraction(0)

    @property
    def burst(self) -> Fraction:
        """Value right after time 0."""
        if not self.segments:
            return Fraction(0)
        at_zero = [s for s in self.segments if s.x == 0]
        return max(s.y for s in at_zero) if at_zero else Fraction(0)

    def segment_defining(self, x: Number) -> int:
        point = Fraction(x)
        for idx in range(len(self.segments) - 1, -1, -1):
            seg = self.segments[idx]
            if seg.x < point or (seg.x == point and not seg.left_open):
                return idx
        raise ValueError(f"No segment defined at {x}")

    def f(self, x: Number) -> Fraction:
        return self.segments[self.segment_defining(x)].f(x)

    def is_concave(self) -> bool:
        return all(b.slope <= a.slope for a, b in zip(self.segments[1:], self.segments[2:]))

    def __str__(self) -> str:
        return "{" + ";".join(str(s) for s in self.segments) + "}"
