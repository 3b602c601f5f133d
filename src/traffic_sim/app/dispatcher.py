# traffic_sim/app/dispatcher.py
import logging
import math

from traffic_sim.app.controllers.demand import DemandHandler
from traffic_sim.app.controllers.fleet import FleetHandler
from traffic_sim.app.controllers.idle import IdleHandler
from traffic_sim.app.controllers.trips import TripHandler
from traffic_sim.app.views import Snapshot, Stats
from traffic_sim.domain.entities.driver import Driver, DriverType
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.ride import RideRequest
from traffic_sim.domain.entities.rider import Rider
from traffic_sim.domain.state import WorldState
from traffic_sim.io.sim_logging import emit

log = logging.getLogger("traffic_sim.dispatch")


def _point(p) -> Point | None:
    if p is None or isinstance(p, Point):
        return p
    x, y = p
    return Point(float(x), float(y))


class Dispatcher:
    """
    Single entry point for user actions and the per-tick update.

    Owns nothing itself: entities live in ``world`` and each concern is
    delegated to its handler. Positions may be given as ``Point`` or as
    ``(x, y)`` pairs.
    """

    def __init__(
        self,
        world: WorldState,
        *,
        fleet: FleetHandler,
        demand: DemandHandler,
        trips: TripHandler,
        idle: IdleHandler,
        sweep_every_ticks: int = 60,
    ):
        if sweep_every_ticks < 1:
            raise ValueError("sweep_every_ticks must be >= 1")
        self.world = world
        self.fleet = fleet
        self.demand = demand
        self.trips = trips
        self.idle = idle
        self.sweep_every_ticks = sweep_every_ticks

    @property
    def now(self) -> float:
        return self.world.t

    # ------------ user actions --------------

    def spawn_driver(
        self, driver_type: DriverType = "ground", pos=None, speed: float | None = None
    ) -> Driver:
        return self.fleet.spawn_driver(driver_type, _point(pos), speed)

    def spawn_rider(self, pos=None) -> Rider:
        return self.fleet.spawn_rider(_point(pos))

    def request_ride(
        self, driver_type: DriverType = "ground", *, rider_id: int | None = None, dropoff=None
    ) -> RideRequest | None:
        return self.demand.request_ride(driver_type, rider_id=rider_id, dropoff=_point(dropoff))

    def assign_nearest_driver(self, ride: RideRequest | int) -> Driver | None:
        if not isinstance(ride, RideRequest):
            ride = self.world.ride(ride)
        return self.idle.assign_nearest_driver(ride)

    def assign_waiting_rides(self) -> list[tuple[int, int]]:
        return self.idle.sweep()

    def release_stuck_rides(self) -> list[int]:
        return self.idle.release_stuck(self.world.t)

    def clean_map(self) -> None:
        w = self.world
        emit(
            log,
            logging.INFO,
            "map_cleaned",
            t=w.t,
            drivers=len(w.drivers),
            riders=len(w.riders),
            rides=len(w.rides),
        )
        w.clear()

    # ------------ per-tick update --------------

    def tick(self, dt: float) -> list[int]:
        """Advance the world by ``dt`` simulated seconds; return ids of rides completed."""
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"tick dt must be finite and >= 0, got {dt}")
        w = self.world
        w.t += dt
        w.ticks += 1

        completed = self.trips.advance(dt)
        if completed:
            self.idle.sweep()

        if w.ticks % self.sweep_every_ticks == 0:
            emit(
                log,
                logging.DEBUG,
                "tick_heartbeat",
                t=w.t,
                ticks=w.ticks,
                drivers=len(w.drivers),
                riders=len(w.riders),
                rides=len(w.rides),
            )
            self.idle.sweep()
            self.idle.release_stuck(w.t)
        return completed

    # ------------ read side --------------

    def snapshot(self) -> Snapshot:
        return Snapshot.of(self.world)

    def stats(self) -> Stats:
        return Stats.of(self.world)
