"""
Clock abstraction so that expiry decisions are deterministic under test.
"""

from __future__ import annotations

from datetime import time
from typing import Protocol

import pendulum
from pendulum import DateTime


class Clock(Protocol):
    """Protocol describing the source of the current wall-clock time."""

    def now(self) -> DateTime:
        """Return the current moment in the business timezone."""


class SystemClock:
    """Clock backed by the system time in a fixed timezone."""

    def __init__(self, timezone: str = "UTC"):
        self.timezone = timezone

    def now(self) -> DateTime:
        return pendulum.now(self.timezone)


class FixedClock:
    """Clock frozen at a given moment; ``advance`` moves it forward."""

    def __init__(self, moment: DateTime):
        self._moment = moment

    def now(self) -> DateTime:
        return self._moment

    def advance(self, **delta: int) -> None:
        self._moment = self._moment.add(**delta)


def wall_time(moment: DateTime) -> time:
    """Return the naive wall-clock time of ``moment``."""
    return time(moment.hour, moment.minute, moment.second, moment.microsecond)
