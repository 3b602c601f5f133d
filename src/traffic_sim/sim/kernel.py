# sim/kernel.py

import heapq
import math
import time
from collections.abc import Callable, Iterable

from .event import BaseEvent
from .hooks import KernelHooks, NoopHooks

Handler = Callable[[BaseEvent], Iterable[BaseEvent] | None]
TickFn = Callable[[float], object]


class Kernel:
    """
    Tick-driven simulation kernel.

    Each ``step(frame_dt)`` scales the frame delta by the simulation-speed
    multiplier, advances simulated time, fires every timer event that became
    due (FIFO among equal times), then calls the tick subscribers with the
    scaled delta. Timer handlers may return follow-up events.
    """

    def __init__(self, hooks: KernelHooks | None = None, speed: float = 1.0):
        self._t = 0.0
        self._ticks = 0
        self._q: list[tuple[float, int, BaseEvent]] = []
        self._seq = 0
        self._subs: dict[type[BaseEvent], list[Handler]] = {}
        self._tick_subs: list[TickFn] = []
        self._hooks = hooks or NoopHooks()
        self._speed = 1.0
        self.set_speed(speed)

    @property
    def now(self) -> float:
        return self._t

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def pending(self) -> int:
        return len(self._q)

    def set_speed(self, speed: float) -> None:
        if not math.isfinite(speed) or speed <= 0:
            raise ValueError(f"simulation speed must be > 0, got {speed}")
        self._speed = float(speed)

    def on(self, etype: type[BaseEvent], handler: Handler) -> None:
        self._subs.setdefault(etype, []).append(handler)

    def on_tick(self, fn: TickFn) -> None:
        self._tick_subs.append(fn)

    def schedule(self, ev: BaseEvent) -> None:
        self._seq += 1
        heapq.heappush(self._q, (ev.t, self._seq, ev))

    def step(self, frame_dt: float) -> float:
        if not math.isfinite(frame_dt) or frame_dt < 0:
            raise ValueError(f"frame dt must be finite and >= 0, got {frame_dt}")
        dt = frame_dt * self._speed
        self._t += dt
        self._fire_due()
        for fn in self._tick_subs:
            fn(dt)
        self._ticks += 1
        return dt

    def _fire_due(self) -> None:
        while self._q and self._q[0][0] <= self._t + 1e-9:
            t, _, ev = heapq.heappop(self._q)
            handlers = self._subs.get(type(ev), ())
            self._hooks.dispatch(ev, qsize=len(self._q), handlers=len(handlers))
            for h in handlers:
                for nxt in h(ev) or ():
                    if nxt.t + 1e-12 < t:
                        self._hooks.error(
                            ev,
                            reason="scheduled_past",
                            scheduled_t=nxt.t,
                            nxt_type=type(nxt).__name__,
                        )
                        raise RuntimeError(f"handler scheduled past event at {nxt.t} < {t}")
                    self.schedule(nxt)

    def run(self, until: float, dt: float = 1 / 60, max_ticks: int | None = None) -> int:
        """Fixed-step headless run until simulated time reaches ``until``."""
        if dt <= 0:
            raise ValueError("dt must be > 0")
        t0 = time.perf_counter()
        self._hooks.run_start(until=until, dt=dt, speed=self._speed)
        ticks = 0
        while self._t + 1e-9 < until:
            self.step(min(dt, (until - self._t) / self._speed))
            ticks += 1
            if max_ticks and ticks >= max_ticks:
                break
        self._hooks.run_end(
            ticks=ticks,
            last_t=self._t,
            qsize=len(self._q),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return ticks
