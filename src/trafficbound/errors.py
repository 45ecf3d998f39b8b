from __future__ import annotations


class TrafficBoundError(Exception):
    """Base class for every failure raised by the traffic-bound engine."""


class OutOfOrderError(TrafficBoundError):
    def __init__(self, time: int, valid_up_to: int) -> None:
        super().__init__(f"Tried to go back in time: {time} < {valid_up_to}")
        self.time = time
        self.valid_up_to = valid_up_to


class MonotonicityViolationError(TrafficBoundError):
    def __init__(self, time: int, value: object, maximum: object) -> None:
        super().__init__(f"Step function must be monotonic: {value} at {time} is below {maximum}")
        self.time = time
        self.value = value
        self.maximum = maximum


class UndefinedValueError(TrafficBoundError):
    def __init__(self, time: int, valid_up_to: int) -> None:
        super().__init__(f"Function not defined to {time} (valid up to {valid_up_to})")
        self.time = time
        self.valid_up_to = valid_up_to


class NoSuchBoundError(TrafficBoundError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class BlockNotFoundError(TrafficBoundError, KeyError):
    def __init__(self, label: str) -> None:
        super().__init__(f"No block labeled {label}")
        self.label = label

    def __str__(self) -> str:
        return str(self.args[0])


class DegenerateCycleError(TrafficBoundError):
    def __init__(self, label: str, value: object) -> None:
        super().__init__(
            f"{label}: can't calculate next bound increment past {value}, "
            "the block only reaches itself through blocks without traffic"
        )
        self.label = label
        self.value = value


class InvalidMessageError(TrafficBoundError, ValueError):
    pass


class GraphFormatError(TrafficBoundError, ValueError):
    pass
