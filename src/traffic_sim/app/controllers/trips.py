# traffic_sim/app/controllers/trips.py
import logging

from traffic_sim.app.protocols import RatingPolicy
from traffic_sim.config.models import FleetModel
from traffic_sim.domain.entities.driver import Driver, GoingToRider, OnRide
from traffic_sim.domain.entities.geography import Route
from traffic_sim.domain.entities.motion import Leg
from traffic_sim.domain.errors import DispatchInvariantError
from traffic_sim.domain.mechanics.mechanics_core import Mechanics
from traffic_sim.domain.state import CompletedRide, WorldState
from traffic_sim.io.business_events import RideCompleted, RiderPickedUp
from traffic_sim.io.sim_logging import emit
from traffic_sim.sim.hooks import KernelHooks, NoopHooks

log = logging.getLogger("traffic_sim.trips")


class TripHandler:
    """
    Moves busy drivers and applies pickup/dropoff transitions.

    ``advance`` runs in two phases. First every busy driver moves from its
    previous-tick position and arrivals are collected; then the transitions
    for those arrivals are applied. A transition therefore never changes
    where another driver moved in the same tick.
    """

    def __init__(
        self,
        world: WorldState,
        mechanics: Mechanics,
        fleet: FleetModel,
        rating: RatingPolicy,
        hooks: KernelHooks | None = None,
    ):
        self.world = world
        self.mechanics = mechanics
        self.fleet = fleet
        self.rating = rating
        self.hooks = hooks or NoopHooks()

    def _ensure_route(self, d: Driver, leg: Leg, eps: float) -> None:
        if leg.route is not None:
            return
        if d.pos.distance_to(leg.target) <= eps:
            route = Route([leg.target], d.pos.distance_to(leg.target))
        else:
            try:
                route = self.mechanics.route(d.type, d.pos, leg.target)
            except Exception:
                log.error(
                    "pathfinding_failed",
                    exc_info=True,
                    extra={
                        "extra": {
                            "t": self.world.t,
                            "driver_id": d.id,
                            "from": d.pos.as_tuple(),
                            "to": leg.target.as_tuple(),
                        }
                    },
                )
                route = self.mechanics.direct(d.pos, leg.target)
                self.world.routing_fallbacks += 1
            else:
                if route.degraded:
                    self.world.routing_fallbacks += 1
        leg.route = route
        leg.index = 0

    def advance(self, dt: float) -> list[int]:
        """Move every busy driver by ``speed * dt``; return ids of rides completed this tick."""
        arrived: list[Driver] = []
        for d in list(self.world.busy_drivers()):
            leg = d.leg
            eps = self.fleet.for_type(d.type).arrival_eps
            self._ensure_route(d, leg, eps)
            pos, travelled = leg.advance(d.pos, d.speed * dt, eps)
            if leg.done:
                # snap onto the target; the arrival epsilon still counts as driven
                travelled += pos.distance_to(leg.target)
                pos = leg.target
            d.pos = pos
            d.distance_travelled += travelled
            self.world.total_driver_distance += travelled
            if isinstance(d.state, OnRide):
                self.world.rider(self.world.ride(d.ride_id).rider_id).pos = pos
            if leg.done:
                arrived.append(d)

        completed = []
        for d in arrived:
            if isinstance(d.state, GoingToRider):
                self.on_pickup(d)
            elif isinstance(d.state, OnRide):
                completed.append(self.on_dropoff(d))
        return completed

    # ------------ transitions --------------

    def on_pickup(self, d: Driver) -> None:
        now = self.world.t
        ride = self.world.ride(d.ride_id)
        if ride.status != "going_to_rider" or ride.assigned_driver != d.id:
            raise DispatchInvariantError(
                f"driver #{d.id} reached pickup of ride #{ride.id} in status {ride.status}"
            )
        rider = self.world.rider(ride.rider_id)
        ride.status = "in_ride"
        ride.picked_up_at = now
        rider.status = "in_ride"
        rider.pos = ride.pickup
        d.start_ride(ride.id, ride.dropoff)
        wait_s = now - ride.created_at
        emit(
            log,
            logging.INFO,
            "rider_picked_up",
            t=now,
            ride_id=ride.id,
            driver_id=d.id,
            rider_id=rider.id,
            wait_s=round(wait_s, 3),
        )
        self.hooks.biz(
            RiderPickedUp(t=now, ride_id=ride.id, driver_id=d.id, rider_id=rider.id, wait_s=wait_s)
        )

    def on_dropoff(self, d: Driver) -> int:
        now = self.world.t
        ride = self.world.ride(d.ride_id)
        if ride.status != "in_ride" or ride.assigned_driver != d.id:
            raise DispatchInvariantError(
                f"driver #{d.id} reached dropoff of ride #{ride.id} in status {ride.status}"
            )
        rider = self.world.rider(ride.rider_id)
        duration = ride.age(now)

        self.world.earnings += ride.fare
        self.world.rating = self.rating.update(self.world.rating, duration)
        self.world.completed.append(
            CompletedRide(
                ride_id=ride.id,
                driver_id=d.id,
                rider_id=rider.id,
                fare=ride.fare,
                duration_s=duration,
                distance=ride.distance,
                completed_at=now,
            )
        )
        d.pos = ride.dropoff
        d.go_idle()
        rider.go_idle(ride.dropoff)
        self.world.remove_ride(ride.id)

        emit(
            log,
            logging.INFO,
            "ride_completed",
            t=now,
            ride_id=ride.id,
            driver_id=d.id,
            fare=ride.fare,
            duration_s=round(duration, 3),
            rating=round(self.world.rating, 3),
        )
        self.hooks.biz(
            RideCompleted(
                t=now,
                ride_id=ride.id,
                driver_id=d.id,
                rider_id=rider.id,
                fare=ride.fare,
                duration_s=duration,
                distance=ride.distance,
                rating=self.world.rating,
            )
        )
        return ride.id
