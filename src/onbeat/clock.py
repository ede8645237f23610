"""Time sources that report elapsed session time in seconds."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


class ClockError(ValueError):
    """Raised when a clock is asked to run backwards."""


@runtime_checkable
class TimeSource(Protocol):
    """Read-only, monotonically nondecreasing elapsed time for one session."""
    def elapsed_seconds(self) -> float: ...


class ManualClock:
    """Deterministic clock driven explicitly by the caller (tests, replays)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def elapsed_seconds(self) -> float:
        return self._now

    def set(self, seconds: float) -> None:
        if seconds < self._now:
            raise ClockError(f"Clock cannot move backwards ({self._now} -> {seconds})")
        self._now = float(seconds)

    def advance(self, delta: float) -> float:
        """Move forward by ``delta`` seconds. Returns the new elapsed time."""
        self.set(self._now + delta)
        return self._now

    def reset(self, seconds: float = 0.0) -> None:
        """Start a new session at ``seconds``."""
        self._now = float(seconds)


class MonotonicClock:
    """Wall-clock time since :meth:`start`, based on ``time.perf_counter``."""

    def __init__(self) -> None:
        self._started_at: float | None = None

    def start(self) -> None:
        self._started_at = time.perf_counter()

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.perf_counter() - self._started_at
