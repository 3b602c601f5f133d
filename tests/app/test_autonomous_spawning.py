# tests/app/test_autonomous_spawning.py
from traffic_sim.app.events import RideRequestDue, SpawnDriverDue, SpawnRiderDue


def autonomous(**kw):
    return {"enabled": True, **kw}


def test_spawning_respects_maxima(make_app):
    app = make_app(autonomous=autonomous(max_riders=5, max_drivers=3))
    app.run(until=60.0, dt=0.1)
    assert len(app.world.drivers) == 3
    assert len(app.world.riders) == 5


def test_intervals_are_in_simulated_time(make_app):
    slow = make_app(autonomous=autonomous(ride_probability=0.0))
    fast = make_app(sim={"seed": 7, "speed": 4.0}, autonomous=autonomous(ride_probability=0.0))
    for _ in range(60):  # one wall second of frames
        slow.kernel.step(1 / 60)
        fast.kernel.step(1 / 60)
    assert len(slow.world.riders) == 0
    # 4 simulated seconds: one rider (t=3), no driver yet (t=5)
    assert len(fast.world.riders) == 1
    assert len(fast.world.drivers) == 0


def test_air_share_picks_air_drivers(make_app):
    app = make_app(autonomous=autonomous(air_share=1.0, max_drivers=2))
    app.run(until=11.0, dt=0.1)
    assert app.world.driver_type_counts() == {"ground": 0, "air": 2}


def test_ride_requests_stop_at_active_cap(make_app):
    app = make_app(
        autonomous=autonomous(ride_probability=1.0, max_active_rides=2, max_drivers=0)
    )
    app.run(until=40.0, dt=0.25)
    assert len(app.world.rides) == 2
    assert all(r.is_waiting for r in app.world.rides.values())


def test_timers_reschedule_themselves(make_app):
    app = make_app(autonomous=autonomous())
    ctl = app.autonomous
    [a] = ctl.on_spawn_rider(SpawnRiderDue(t=3.0))
    [b] = ctl.on_spawn_driver(SpawnDriverDue(t=5.0))
    [c] = ctl.on_ride_request(RideRequestDue(t=2.0))
    assert (a.t, b.t, c.t) == (6.0, 10.0, 4.0)
    assert app.kernel.pending == 3


def test_same_seed_same_run(make_app):
    stats = []
    for _ in range(2):
        app = make_app(autonomous=autonomous(ride_probability=0.6))
        app.run(until=90.0)
        s = app.dispatcher.stats()
        stats.append((s.earnings, s.completed_rides, s.total_driver_distance, s.ticks))
    assert stats[0] == stats[1]
