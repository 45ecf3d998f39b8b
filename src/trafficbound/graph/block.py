from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Iterator, Sequence, Union

from trafficbound.curves import StepFunction, Traffic
from trafficbound.errors import DegenerateCycleError, InvalidMessageError

# Exceedance queries answer ``math.inf`` when the bound never grows again.
Time = Union[int, float]


class Direction(str, Enum):
    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True, slots=True, eq=False)
class Message:
    label: str
    block: Block = field(repr=False)
    offset: int
    size: int


class Block:
    """Periodic traffic source with cached prefix and suffix traffic bounds.

    The prefix bound at ``t`` is the most traffic any run can generate in the
    first ``t`` time units after entering this block; past one period it
    continues into the successor blocks. The suffix bound mirrors it for the
    last ``t`` time units before leaving, continuing into the predecessors.
    Both are step functions grown lazily, one increment at a time.
    """

    def __init__(self, label: str, period: int) -> None:
        if period <= 0:
            raise ValueError(f"{label}: period must be positive, got {period}")
        self.label = label
        self.period = period
        self.total_traffic = 0
        self._messages: list[Message] = []
        self._next: dict[Block, None] = {}
        self._previous: dict[Block, None] = {}
        self._bounds = {Direction.PREFIX: StepFunction(), Direction.SUFFIX: StepFunction()}
        self._extended = False

    def __repr__(self) -> str:
        return f"Block(label={self.label!r}, period={self.period}, messages={len(self._messages)})"

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> Sequence[Message]:
        return tuple(self._messages)

    def message(self, idx: int) -> Message:
        return self._messages[idx]

    @property
    def next_blocks(self) -> Sequence[Block]:
        return tuple(self._next)

    @property
    def previous_blocks(self) -> Sequence[Block]:
        return tuple(self._previous)

    def add_message(self, label: str, offset: int, size: int) -> Message:
        if self._extended:
            raise InvalidMessageError(
                f"{self.label}/{label}: messages can't be added once the traffic bounds were extended"
            )
        if offset < 0 or offset >= self.period:
            raise InvalidMessageError(
                f"Message offset invalid (below zero or exceeding period): {self.label}/{label} at {offset}"
            )
        if size < 0:
            raise InvalidMessageError(f"Message size must not be negative: {self.label}/{label} ({size})")
        if self._messages and offset < self._messages[-1].offset:
            raise InvalidMessageError(
                f"{self.label}/{label}: offset {offset} precedes the previous message at "
                f"{self._messages[-1].offset}"
            )
        message = Message(label, self, offset, size)
        self._messages.append(message)
        self.total_traffic += size

        # A message at offset n only counts in intervals of length n + 1
        prefix = self._bounds[Direction.PREFIX]
        prefix.set_value_at(offset + 1, prefix.get_value(prefix.valid_up_to) + size)
        self._rebuild_suffix()
        return message

    def _rebuild_suffix(self) -> None:
        suffix = StepFunction()
        for message in reversed(self._messages):
            suffix.set_value_at(self.period - message.offset, suffix.get_value(suffix.valid_up_to) + message.size)
        self._bounds[Direction.SUFFIX] = suffix

    def add_next(self, block: Block) -> None:
        self._next[block] = None
        block._previous[self] = None

    def max_prefix(self, time: int) -> Traffic:
        return self._bound_at(Direction.PREFIX, time)

    def max_suffix(self, time: int) -> Traffic:
        return self._bound_at(Direction.SUFFIX, time)

    def precalculate_max_prefix(self, time: int) -> None:
        self._precalculate(Direction.PREFIX, time)

    def precalculate_max_suffix(self, time: int) -> None:
        self._precalculate(Direction.SUFFIX, time)

    def earliest_time_prefix_exceeds(self, value: Traffic) -> Time:
        return self._earliest_exceeding(Direction.PREFIX, value)

    def earliest_time_suffix_exceeds(self, value: Traffic) -> Time:
        return self._earliest_exceeding(Direction.SUFFIX, value)

    def max_traffic_from(self, message_idx: int, length: int) -> Traffic:
        """Traffic in ``[offset, offset + length)`` starting just before message ``message_idx``.

        Earlier messages sharing the same offset are included.
        """
        offset = self._messages[message_idx].offset
        return self.max_prefix(offset + length) - self.max_prefix(offset)

    def max_traffic(self, length: int) -> Traffic:
        """Most traffic in any interval of ``length`` that begins inside this block."""
        self._precalculate(Direction.PREFIX, self.period + length)
        return self._bounds[Direction.PREFIX].maximum_interval(length, self.period)

    def shortest_interval_where_max_traffic_exceeds(self, value: Traffic) -> Time:
        shortest: Time = math.inf
        for message in self._messages:
            # offset n means n slots precede the message
            before = self.max_prefix(message.offset)
            reach = self.earliest_time_prefix_exceeds(value + before)
            shortest = min(shortest, reach - message.offset)
        return shortest

    def _linked(self, direction: Direction) -> Sequence[Block]:
        return tuple(self._next if direction is Direction.PREFIX else self._previous)

    def _reach(self, direction: Direction) -> list[tuple[Block, int]]:
        """Blocks with traffic that continue this one, each with the shortest delay spent in empty blocks on the way.

        Empty blocks only shift the bounds behind them, so they are walked
        through rather than queried, and a longer detour to the same block is
        always dominated by the shorter one.
        """
        order = count()
        queue = [(0, next(order), block) for block in self._linked(direction)]
        heapq.heapify(queue)
        crossed: set[Block] = set()
        reach: dict[Block, int] = {}
        while queue:
            delay, _, block = heapq.heappop(queue)
            if block.total_traffic > 0:
                reach.setdefault(block, delay)
                continue
            if block in crossed:
                continue
            crossed.add(block)
            for successor in block._linked(direction):
                heapq.heappush(queue, (delay + block.period, next(order), successor))
        if not reach and _closes_cycle(crossed, direction):
            raise DegenerateCycleError(self.label, self._bounds[direction].maximum_value() - self.total_traffic)
        return list(reach.items())

    def _bound_at(self, direction: Direction, time: int) -> Traffic:
        if time <= 0:
            return 0
        if time == self.period:
            return self.total_traffic
        self._precalculate(direction, time)
        return self._bounds[direction].get_value(time)

    def _precalculate(self, direction: Direction, time: int) -> None:
        bound = self._bounds[direction]
        while bound.valid_up_to < time:
            if not self._extend(direction):
                bound.extend_to(time)

    def _earliest_exceeding(self, direction: Direction, value: Traffic) -> Time:
        bound = self._bounds[direction]
        while value >= bound.maximum_value():
            if not self._extend(direction):
                return math.inf
        return bound.first_time_exceeding(value)

    def _extend(self, direction: Direction) -> bool:
        """Record the next increment of the bound; ``False`` when it never grows again."""
        self._extended = True
        reach = self._reach(direction)
        # Traffic still needed beyond this block's own messages
        remaining = self._bounds[direction].maximum_value() - self.total_traffic
        earliest = min((block._earliest_exceeding(direction, remaining) + delay for block, delay in reach), default=math.inf)
        if earliest == math.inf:
            return False
        increment = int(earliest) + self.period
        traffic = max(block._bound_at(direction, increment - self.period - delay) for block, delay in reach)
        self._bounds[direction].set_value_at(increment, traffic + self.total_traffic)
        return True


def _closes_cycle(blocks: set[Block], direction: Direction) -> bool:
    """Whether the links between ``blocks`` contain a cycle; every linked block must be in ``blocks``."""
    incoming = dict.fromkeys(blocks, 0)
    for block in blocks:
        for successor in block._linked(direction):
            incoming[successor] += 1
    ready = [block for block, count_in in incoming.items() if count_in == 0]
    removed = 0
    while ready:
        block = ready.pop()
        removed += 1
        for successor in block._linked(direction):
            incoming[successor] -= 1
            if incoming[successor] == 0:
                ready.append(successor)
    return removed < len(incoming)
