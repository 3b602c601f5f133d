# traffic_sim/app/controllers/demand.py
import logging

from traffic_sim.app.controllers.idle import IdleHandler
from traffic_sim.app.protocols import PricingPolicy
from traffic_sim.domain.entities.driver import DRIVER_TYPES, DriverType
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.ride import RideRequest
from traffic_sim.domain.errors import InvalidCoordinates
from traffic_sim.domain.mechanics.mechanics_core import Mechanics
from traffic_sim.domain.state import WorldState
from traffic_sim.io.business_events import RideRequested
from traffic_sim.io.sim_logging import emit
from traffic_sim.sim.hooks import KernelHooks, NoopHooks

log = logging.getLogger("traffic_sim.demand")


class DemandHandler:
    def __init__(
        self,
        world: WorldState,
        mechanics: Mechanics,
        pricing: PricingPolicy,
        idle: IdleHandler,
        rng,
        hooks: KernelHooks | None = None,
    ):
        self.world = world
        self.mechanics = mechanics
        self.pricing = pricing
        self.idle = idle
        self.rng = rng
        self.hooks = hooks or NoopHooks()

    def _pick_rider(self, rider_id: int | None):
        if rider_id is not None:
            r = self.world.riders.get(rider_id)
            return r if r is not None and r.status == "idle" else None
        idle = self.world.idle_riders()
        if not idle:
            return None
        return idle[int(self.rng.integers(len(idle)))]

    def request_ride(
        self,
        driver_type: DriverType = "ground",
        *,
        rider_id: int | None = None,
        dropoff: Point | None = None,
    ) -> RideRequest | None:
        """
        Create a ride for an idle rider and try to match it right away.

        Returns None when no idle rider exists (an unknown ``rider_id`` counts
        as none) or the coordinates are not finite; in the latter case nothing
        is created.
        """
        if driver_type not in DRIVER_TYPES:
            raise ValueError(f"unknown driver type {driver_type!r}")
        rider = self._pick_rider(rider_id)
        if rider is None:
            emit(log, logging.INFO, "no_idle_rider", t=self.world.t, rider_id=rider_id)
            return None

        dest = dropoff if dropoff is not None else self.mechanics.sample_destination()
        try:
            fare, dist = self.pricing.quote(rider.pos, dest)
        except InvalidCoordinates as exc:
            emit(
                log,
                logging.ERROR,
                "invalid_ride_coordinates",
                t=self.world.t,
                rider_id=rider.id,
                pickup=rider.pos.as_tuple(),
                dropoff=dest.as_tuple(),
                error=str(exc),
            )
            return None

        ride = RideRequest(
            id=self.world.ids.next("ride"),
            rider_id=rider.id,
            pickup=rider.pos,
            dropoff=dest,
            fare=fare,
            distance=dist,
            created_at=self.world.t,
            driver_type=driver_type,
        )
        self.world.add_ride(ride)
        rider.status = "waiting"
        rider.ride_id = ride.id
        emit(
            log,
            logging.INFO,
            "ride_requested",
            t=self.world.t,
            ride_id=ride.id,
            rider_id=rider.id,
            driver_type=driver_type,
            fare=fare,
            distance=round(dist, 2),
        )
        self.hooks.biz(
            RideRequested(
                t=self.world.t,
                ride_id=ride.id,
                rider_id=rider.id,
                driver_type=driver_type,
                pickup=ride.pickup.as_tuple(),
                dropoff=ride.dropoff.as_tuple(),
                fare=fare,
                distance=dist,
            )
        )
        self.idle.assign_nearest_driver(ride)
        return ride
