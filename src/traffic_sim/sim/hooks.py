# sim/hooks.py
from typing import Protocol

from traffic_sim.sim.event import BaseEvent


class KernelHooks(Protocol):
    def run_start(self, *, until, dt, speed): ...
    def run_end(self, *, ticks, last_t, qsize, wall_ms): ...
    def dispatch(self, ev: BaseEvent, *, qsize, handlers): ...
    def error(self, ev: BaseEvent | None, *, reason: str, **kw): ...
    def biz(self, ev): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def dispatch(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass

    def biz(self, *_):
        pass
