# tests/sim/test_frame_clock.py
from datetime import UTC, datetime

import pytest

from traffic_sim.sim.clock import FrameTimer, SimClock


class FakeNow:
    def __init__(self, *ts):
        self.ts = list(ts)

    def __call__(self):
        return self.ts.pop(0)


def test_first_delta_is_zero_then_elapsed():
    timer = FrameTimer(max_dt=0.25, now=FakeNow(10.0, 10.016, 10.05))
    assert timer.delta() == 0.0
    assert timer.delta() == pytest.approx(0.016)
    assert timer.delta() == pytest.approx(0.034)


def test_stalled_frame_is_clamped():
    timer = FrameTimer(max_dt=0.25, now=FakeNow(0.0, 5.0))
    timer.delta()
    assert timer.delta() == 0.25


def test_backwards_clock_gives_zero_and_reset_restarts():
    timer = FrameTimer(now=FakeNow(1.0, 0.5, 7.0))
    timer.delta()
    assert timer.delta() == 0.0
    timer.reset()
    assert timer.delta() == 0.0


def test_max_dt_must_be_positive():
    with pytest.raises(ValueError):
        FrameTimer(max_dt=0)


def test_sim_seconds_map_onto_the_wall_clock_epoch():
    clock = SimClock.utc_epoch(2025, 1, 1)
    assert clock.to_wall(0.0) == datetime(2025, 1, 1, tzinfo=UTC)
    assert clock.to_wall(5400.0) == datetime(2025, 1, 1, 1, 30, tzinfo=UTC)
