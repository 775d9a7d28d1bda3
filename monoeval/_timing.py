from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta


class PerformanceTimer:
    """Context manager class for measuring the execution time of a code block.
    Class is using time.perf_counter() function to measure time under the hood.

    Example:
    >>> with PerformanceTimer() as timer:
    ...     time.sleep(0.5)
    >>> print(timer)
    """

    def __init__(self) -> None:
        self.start_time: float = None
        self.end_time: float = None
        self._time: float = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args, **kwargs):
        self.end_time = time.perf_counter()
        self._time = self.end_time - self.start_time

    def __str__(self) -> str:
        return str(self.timedelta)

    @property
    def time(self) -> float:
        """
        Returns:
            float: time in seconds
        """
        return self._time

    @property
    def timedelta(self) -> timedelta:
        """
        Returns:
            timedelta: measured time, zero if the timer has not finished yet
        """
        if self._time is None:
            return timedelta()
        return timedelta(seconds=self._time)


@dataclass(frozen=True)
class RunTimes:
    model_time: timedelta = timedelta()
    training_time: timedelta = timedelta()
    test_time: timedelta = timedelta()

    def __add__(self, other: RunTimes) -> RunTimes:
        if other == 0:
            return self
        if not isinstance(other, RunTimes):
            raise TypeError(f"Cannot add {type(other)} to RunTimes")
        return RunTimes(
            model_time=self.model_time + other.model_time,
            training_time=self.training_time + other.training_time,
            test_time=self.test_time + other.test_time,
        )

    def __radd__(self, other: RunTimes) -> RunTimes:
        return self.__add__(other)

    def __repr__(self) -> str:
        return (
            f"model_time={self.model_time.total_seconds()}, "
            f"training_time={self.training_time.total_seconds()}, "
            f"test_time={self.test_time.total_seconds()}"
        )
