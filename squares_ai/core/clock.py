"""
Time sources for budgeted search.

The search and tuning loops never own time: they query an injected clock for
a millisecond reading and compare it with a deadline.
"""
from abc import ABC, abstractmethod
import time


class Clock(ABC):
    """A monotonic millisecond time source."""

    @abstractmethod
    def now_ms(self) -> float:
        """Get the current reading in milliseconds."""

    def deadline(self, budget_ms: float) -> float:
        """Get the reading at which a budget starting now runs out."""
        return self.now_ms() + budget_ms


class MonotonicClock(Clock):
    """Wall-clock time from ``time.monotonic``."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class TickingClock(Clock):
    """
    A deterministic clock that advances by a fixed step each time it is read.

    Loops bounded by this clock run a reproducible number of iterations,
    which makes budgeted search repeatable under a fixed random seed.
    """

    def __init__(self, step_ms: float = 1.0, start_ms: float = 0.0):
        if step_ms <= 0:
            raise ValueError("step_ms must be positive")
        self.step_ms = step_ms
        self.current_ms = start_ms

    def now_ms(self) -> float:
        reading = self.current_ms
        self.current_ms += self.step_ms
        return reading

    def advance(self, ms: float) -> None:
        """Move the clock forward without a reading."""
        self.current_ms += ms
