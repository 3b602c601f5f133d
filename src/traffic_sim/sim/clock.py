# sim/clock.py
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True)
class SimClock:
    epoch: datetime  # wall-time of simulated t=0

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    # sim seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)


class FrameTimer:
    """
    Wall-clock frame delta for frame-driven front ends.

    ``delta()`` returns the seconds elapsed since the previous call, clamped to
    ``max_dt`` so a stalled frame (hidden tab, debugger) does not teleport
    drivers across the map in one tick.
    """

    def __init__(self, max_dt: float = 0.25, now: Callable[[], float] = time.perf_counter):
        if max_dt <= 0:
            raise ValueError("max_dt must be > 0")
        self.max_dt = max_dt
        self._now = now
        self._last: float | None = None

    def reset(self) -> None:
        self._last = None

    def delta(self) -> float:
        t = self._now()
        if self._last is None:
            self._last = t
            return 0.0
        dt = min(max(0.0, t - self._last), self.max_dt)
        self._last = t
        return dt
