"""Clock helpers used for session expiry."""

from __future__ import annotations

import time


class TimeManager:
    """Monotonic millisecond clock."""

    def now_ms(self) -> float:
        return time.perf_counter() * 1000.0


class ManualClock(TimeManager):
    """Clock that only moves when told to. Handy for tests and replays."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        """Move the clock forward by ``ms`` and return the new time."""

        self._now += ms
        return self._now


__all__ = ["TimeManager", "ManualClock"]
