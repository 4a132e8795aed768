"""
Clock implementations.

Recording stamps events with wall-clock milliseconds. Tests swap in a
manual clock so timestamps are predictable.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Current time in integer milliseconds."""
        ...


class SystemClock:
    """Wall-clock time source in epoch milliseconds."""

    def now(self) -> int:
        return time.time_ns() // 1_000_000


class ManualClock:
    """
    Manually advanced time source.

    In tests: set or advance explicitly.
    Never moves backwards.
    """

    def __init__(self, start: int = 0) -> None:
        self.current = start

    def now(self) -> int:
        """Get current timestamp without advancing."""
        return self.current

    def advance(self, step: int = 1) -> int:
        """Advance clock by step milliseconds and return the new time."""
        if step < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.current += step
        return self.current
