# traffic_sim/policy/matching.py
from collections.abc import Iterable
from dataclasses import dataclass

from traffic_sim.app.protocols import MatchingPolicy
from traffic_sim.domain.entities.driver import Driver
from traffic_sim.domain.entities.ride import RideRequest


@dataclass
class NearestIdleMatchingPolicy(MatchingPolicy):
    """
    Greedy nearest-distance matching.

    Only idle drivers of the ride's type are candidates. Candidates are scanned
    in the order given (id order for the world store) with a strict ``<``, so
    ties go to the first one seen. ``claimed`` holds ids already taken in the
    current sweep.
    """

    def nearest_driver(
        self, ride: RideRequest, drivers: Iterable[Driver], claimed: set[int] | None = None
    ) -> tuple[Driver, float] | None:
        best, best_d = None, float("inf")
        for d in drivers:
            if not d.is_idle or d.type != ride.driver_type:
                continue
            if claimed and d.id in claimed:
                continue
            dist = d.pos.distance_to(ride.pickup)
            if dist < best_d:
                best, best_d = d, dist
        return None if best is None else (best, best_d)

    def nearest_ride(
        self, driver: Driver, rides: Iterable[RideRequest], claimed: set[int] | None = None
    ) -> tuple[RideRequest, float] | None:
        if not driver.is_idle:
            return None
        best, best_d = None, float("inf")
        for r in rides:
            if not r.is_waiting or r.driver_type != driver.type:
                continue
            if claimed and r.id in claimed:
                continue
            dist = driver.pos.distance_to(r.pickup)
            if dist < best_d:
                best, best_d = r, dist
        return None if best is None else (best, best_d)

    def match(
        self, rides: Iterable[RideRequest], drivers: Iterable[Driver]
    ) -> list[tuple[RideRequest, Driver, float]]:
        pool = list(drivers)
        claimed: set[int] = set()
        out = []
        for ride in rides:
            if not ride.is_waiting:
                continue
            hit = self.nearest_driver(ride, pool, claimed)
            if hit is None:
                continue
            d, dist = hit
            claimed.add(d.id)
            out.append((ride, d, dist))
        return out
