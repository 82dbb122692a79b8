"""Clocks that supply record timestamps, including a manual clock for tests."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of monotonic timestamps in seconds."""

    @abstractmethod
    def now(self) -> float:
        """Return the current monotonic time in seconds."""


class SystemClock(Clock):
    """Clock backed by the system's monotonic timer."""

    def now(self) -> float:
        return time.monotonic()


class MockClock(Clock):
    """Clock that only moves forward when advanced by hand."""

    def __init__(self) -> None:
        self._base = time.monotonic()
        self._offset = 0.0

    def advance(self, seconds: float) -> None:
        """Move the clock forward by the given number of seconds."""
        if seconds < 0:
            raise ValueError("a clock cannot be advanced by a negative duration")
        self._offset += seconds

    def now(self) -> float:
        return self._base + self._offset