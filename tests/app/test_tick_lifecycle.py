# tests/app/test_tick_lifecycle.py
import logging

import pytest

from traffic_sim.domain.entities.geography import Point
from traffic_sim.io.business_events import RideCompleted, RiderPickedUp
from traffic_sim.policy.rating import SpeedBonusRatingPolicy


def run_until_done(d, ride_id, dt=0.1, max_ticks=2000):
    for _ in range(max_ticks):
        if ride_id in d.tick(dt):
            return
    raise AssertionError(f"ride {ride_id} never completed")


def test_full_ground_ride_lifecycle(make_app):
    app = make_app(rating={"initial": 3.0})
    d, world = app.dispatcher, app.world
    driver = d.spawn_driver(pos=(116, 100))
    rider = d.spawn_rider(pos=(396, 100))
    ride = d.request_ride(rider_id=rider.id, dropoff=(396, 400))
    assert ride.fare == 30

    d.tick(0.1)
    # the first tick routes along row 0 to column 2
    assert [p.as_tuple() for p in driver.leg.waypoints] == [
        (116.0, 100.0),
        (256.0, 100.0),
        (396.0, 100.0),
        (396.0, 100.0),
    ]
    assert driver.pos.x == pytest.approx(131.0)
    assert driver.pos.y == pytest.approx(100.0)

    run_until_done(d, ride.id)

    assert world.rides == {}
    assert driver.status == "idle" and driver.pos == Point(396, 400)
    assert rider.status == "idle" and rider.pos == Point(396, 400)
    assert world.earnings == 30
    [done] = world.completed
    assert done.ride_id == ride.id and done.fare == 30 and done.distance == 300.0
    assert world.rating == pytest.approx(SpeedBonusRatingPolicy().update(3.0, done.duration_s))
    assert driver.distance_travelled == pytest.approx(280 + 300, abs=1e-6)
    assert world.total_driver_distance == pytest.approx(driver.distance_travelled)

    stats = d.stats()
    assert stats.completed_rides == 1
    assert stats.avg_ride_duration_s == pytest.approx(done.duration_s)
    assert stats.ride_distances == (300.0,)
    assert stats.active_rides == 0

    [picked] = app.sink.of_type(RiderPickedUp)
    [completed] = app.sink.of_type(RideCompleted)
    assert picked.ride_id == completed.ride_id == ride.id
    assert completed.t >= picked.t


def test_rider_rides_along_with_driver(make_app):
    d = make_app().dispatcher
    driver = d.spawn_driver(pos=(500, 500))
    rider = d.spawn_rider(pos=(500, 500))
    ride = d.request_ride(rider_id=rider.id, dropoff=(1500, 1000))

    d.tick(0.1)  # already at the pickup
    assert ride.status == "in_ride"
    assert rider.status == "in_ride"
    assert driver.status == "on_ride"
    assert ride.picked_up_at == pytest.approx(0.1)

    for _ in range(10):
        d.tick(0.1)
        assert rider.pos == driver.pos
    assert driver.pos != Point(500, 500)


def test_air_driver_flies_straight(make_app):
    d = make_app().dispatcher
    driver = d.spawn_driver("air", pos=(100, 100))
    rider = d.spawn_rider(pos=(400, 500))
    d.request_ride("air", rider_id=rider.id, dropoff=(900, 900))

    d.tick(1.0)
    assert driver.leg.waypoints == [Point(400, 500)]
    assert driver.pos.x == pytest.approx(220.0)
    assert driver.pos.y == pytest.approx(260.0)


def test_free_driver_is_reassigned_on_dropoff(make_app):
    d = make_app().dispatcher
    driver = d.spawn_driver(pos=(536, 400))
    r1 = d.spawn_rider(pos=(536, 400))
    r2 = d.spawn_rider(pos=(816, 600))
    first = d.request_ride(rider_id=r1.id, dropoff=(816, 400))
    second = d.request_ride(rider_id=r2.id, dropoff=(1096, 600))
    assert second.is_waiting

    for _ in range(2000):
        if first.id in d.tick(0.1):
            break
    assert second.assigned_driver == driver.id
    assert driver.status == "going_to_rider"
    run_until_done(d, second.id)
    assert len(d.world.completed) == 2


def test_driver_counts_are_conserved(make_app):
    app = make_app()
    d = app.dispatcher
    for _ in range(6):
        d.spawn_driver()
    d.spawn_driver("air")
    for _ in range(10):
        d.spawn_rider()
    for _ in range(8):
        d.request_ride()
    for i in range(3000):
        d.tick(1 / 60)
        counts = app.world.driver_status_counts()
        assert sum(counts.values()) == 7
        busy = counts["going_to_rider"] + counts["on_ride"]
        assert busy == len(app.world.active_rides())
        for ride in app.world.rides.values():
            assert (ride.assigned_driver is None) == (ride.status == "waiting_for_pickup")


def test_snapshot_is_a_read_only_projection(make_app):
    d = make_app().dispatcher
    driver = d.spawn_driver(pos=(116, 100))
    rider = d.spawn_rider(pos=(396, 100))
    d.request_ride(rider_id=rider.id, dropoff=(396, 400))
    d.tick(0.1)

    snap = d.snapshot()
    [dv] = snap.drivers
    assert dv.id == driver.id and dv.status == "going_to_rider"
    assert dv.waypoints[-1] == (396.0, 100.0)
    assert dv.route_index == driver.leg.index
    assert snap.rides[0].assigned_driver == driver.id
    assert snap.stats.avg_pickup_distance == pytest.approx(driver.pos.distance_to(Point(396, 100)))
    with pytest.raises(AttributeError):
        dv.status = "idle"


def test_pickup_distance_ignores_rides_in_progress(make_app):
    d = make_app().dispatcher
    driver = d.spawn_driver(pos=(500, 500))
    rider = d.spawn_rider(pos=(500, 500))
    d.request_ride(rider_id=rider.id, dropoff=(1500, 500))
    for _ in range(30):
        d.tick(0.1)

    assert driver.status == "on_ride"
    assert driver.pos.distance_to(Point(500, 500)) > 0
    s = d.stats()
    assert (s.active_rides, s.drivers_by_status["on_ride"]) == (1, 1)
    assert s.avg_pickup_distance == 0.0

    # a second ride still being approached is the only one averaged
    other = d.spawn_driver(pos=(100, 100))
    far = d.spawn_rider(pos=(100, 400))
    d.request_ride(rider_id=far.id, dropoff=(900, 400))
    assert other.status == "going_to_rider"
    assert d.stats().avg_pickup_distance == pytest.approx(300.0)


def test_clean_map_resets_everything_but_time(make_app):
    d = make_app().dispatcher
    d.spawn_driver(pos=(116, 100))
    rider = d.spawn_rider(pos=(396, 100))
    d.request_ride(rider_id=rider.id, dropoff=(396, 400))
    for _ in range(10):
        d.tick(0.1)
    t = d.now

    d.clean_map()
    stats = d.stats()
    assert (stats.active_rides, stats.completed_rides, stats.earnings) == (0, 0, 0.0)
    assert stats.rating == 5.0
    assert d.world.drivers == {} and d.world.riders == {} and d.world.rides == {}
    assert d.now == t
    assert d.spawn_driver().id == 1


def test_tick_rejects_bad_dt(make_app):
    d = make_app().dispatcher
    for bad in (-1.0, float("nan"), float("inf")):
        with pytest.raises(ValueError):
            d.tick(bad)


class ExplodingRouter:
    def route(self, a, b):
        raise RuntimeError("boom")


def test_router_exception_degrades_to_direct_flight(make_app, caplog):
    app = make_app()
    app.mechanics.routers["ground"] = ExplodingRouter()
    d = app.dispatcher
    driver = d.spawn_driver(pos=(116, 100))
    rider = d.spawn_rider(pos=(396, 300))
    d.request_ride(rider_id=rider.id, dropoff=(396, 400))

    with caplog.at_level(logging.ERROR):
        d.tick(0.1)
    assert driver.leg.waypoints == [Point(396, 300)]
    assert d.stats().routing_fallbacks == 1
    assert any(r.getMessage() == "pathfinding_failed" and r.exc_info for r in caplog.records)
