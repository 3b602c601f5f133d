# traffic_sim/app/controllers/idle.py
import logging

from traffic_sim.app.protocols import MatchingPolicy
from traffic_sim.domain.entities.driver import Driver
from traffic_sim.domain.entities.ride import RideRequest
from traffic_sim.domain.errors import DispatchInvariantError
from traffic_sim.domain.state import WorldState
from traffic_sim.io.business_events import RideAssigned, RideReleased
from traffic_sim.io.sim_logging import emit
from traffic_sim.sim.hooks import KernelHooks, NoopHooks

log = logging.getLogger("traffic_sim.dispatch")


class IdleHandler:
    """Matches idle drivers to waiting rides and expires rides older than the timeout."""

    def __init__(
        self,
        world: WorldState,
        matching: MatchingPolicy,
        *,
        stuck_timeout_s: float = 30.0,
        hooks: KernelHooks | None = None,
    ):
        self.world = world
        self.matching = matching
        self.stuck_timeout_s = stuck_timeout_s
        self.hooks = hooks or NoopHooks()

    def _assign(self, ride: RideRequest, d: Driver, dist: float) -> None:
        rider = self.world.rider(ride.rider_id)
        ride.assign(d.id)
        d.go_to_rider(ride.id, ride.pickup)
        rider.status = "waiting"
        emit(
            log,
            logging.INFO,
            "ride_assigned",
            t=self.world.t,
            ride_id=ride.id,
            driver_id=d.id,
            pickup_distance=round(dist, 2),
        )
        self.hooks.biz(
            RideAssigned(t=self.world.t, ride_id=ride.id, driver_id=d.id, pickup_distance=dist)
        )

    # ------------ matching --------------

    def assign_nearest_driver(
        self, ride: RideRequest, claimed: set[int] | None = None
    ) -> Driver | None:
        if not ride.is_waiting:
            return None
        hit = self.matching.nearest_driver(
            ride, self.world.idle_drivers(ride.driver_type), claimed
        )
        if hit is None:
            self.world.no_driver_events += 1
            emit(
                log,
                logging.WARNING,
                "no_driver_available",
                t=self.world.t,
                ride_id=ride.id,
                driver_type=ride.driver_type,
            )
            return None
        d, dist = hit
        self._assign(ride, d, dist)
        if claimed is not None:
            claimed.add(d.id)
        return d

    def on_driver_available(self, d: Driver) -> RideRequest | None:
        """A driver just became idle: hand it the nearest waiting ride of its type, if any."""
        hit = self.matching.nearest_ride(d, self.world.waiting_rides(d.type))
        if hit is None:
            return None
        ride, dist = hit
        self._assign(ride, d, dist)
        return ride

    def sweep(self) -> list[tuple[int, int]]:
        pairs = self.matching.match(self.world.waiting_rides(), list(self.world.idle_drivers()))
        for ride, d, dist in pairs:
            self._assign(ride, d, dist)
        return [(ride.id, d.id) for ride, d, _ in pairs]

    # ------------ stuck rides --------------

    def release_stuck(self, now: float) -> list[int]:
        released = []
        for ride in list(self.world.rides.values()):
            # any status, waiting included
            if ride.age(now) > self.stuck_timeout_s:
                self.release(ride, now)
                released.append(ride.id)
        return released

    def release(self, ride: RideRequest, now: float) -> None:
        """Delete ``ride`` and put its driver and rider back to idle."""
        rider = self.world.rider(ride.rider_id)
        driver_id = ride.assigned_driver
        if driver_id is not None:
            d = self.world.driver(driver_id)
            if d.ride_id != ride.id:
                raise DispatchInvariantError(
                    f"ride #{ride.id} assigned to driver #{d.id} which serves {d.ride_id}"
                )
            d.go_idle()
        rider.go_idle()
        status = ride.status
        self.world.remove_ride(ride.id)
        self.world.stuck_released += 1
        emit(
            log,
            logging.WARNING,
            "stuck_ride_released",
            t=now,
            ride_id=ride.id,
            driver_id=driver_id,
            rider_id=rider.id,
            status=status,
            age_s=round(ride.age(now), 3),
        )
        self.hooks.biz(
            RideReleased(
                t=now,
                ride_id=ride.id,
                driver_id=driver_id,
                rider_id=rider.id,
                status=status,
                age_s=ride.age(now),
            )
        )
