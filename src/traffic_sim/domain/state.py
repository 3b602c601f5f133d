# traffic_sim/domain/state.py
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field

from traffic_sim.domain.entities.driver import Driver, DriverType
from traffic_sim.domain.entities.ride import RideRequest
from traffic_sim.domain.entities.rider import Rider
from traffic_sim.domain.errors import DispatchInvariantError


@dataclass
class IdAllocator:
    """Per-world monotonic ids, one counter per entity kind, starting at 1."""

    counters: dict[str, int] = field(default_factory=dict)

    def next(self, kind: str) -> int:
        n = self.counters.get(kind, 0) + 1
        self.counters[kind] = n
        return n

    def reset(self) -> None:
        self.counters.clear()


@dataclass(frozen=True)
class CompletedRide:
    ride_id: int
    driver_id: int
    rider_id: int
    fare: int
    duration_s: float
    distance: float
    completed_at: float


@dataclass
class WorldState:
    width: float = 2400.0
    height: float = 1600.0
    initial_rating: float = 5.0
    t: float = 0.0
    ticks: int = 0
    drivers: dict[int, Driver] = field(default_factory=dict)
    riders: dict[int, Rider] = field(default_factory=dict)
    rides: dict[int, RideRequest] = field(default_factory=dict)
    completed: list[CompletedRide] = field(default_factory=list)
    earnings: float = 0.0
    rating: float | None = None
    total_driver_distance: float = 0.0
    stuck_released: int = 0
    routing_fallbacks: int = 0
    no_driver_events: int = 0
    ids: IdAllocator = field(default_factory=IdAllocator)

    def __post_init__(self):
        if self.rating is None:
            self.rating = self.initial_rating

    # ---------------- entity store ----------------

    def add_driver(self, d: Driver) -> None:
        self.drivers[d.id] = d

    def add_rider(self, r: Rider) -> None:
        self.riders[r.id] = r

    def add_ride(self, ride: RideRequest) -> None:
        self.rides[ride.id] = ride

    def remove_ride(self, ride_id: int) -> RideRequest | None:
        return self.rides.pop(ride_id, None)

    def driver(self, driver_id: int) -> Driver:
        d = self.drivers.get(driver_id)
        if d is None:
            raise DispatchInvariantError(f"unknown driver #{driver_id}")
        return d

    def rider(self, rider_id: int) -> Rider:
        r = self.riders.get(rider_id)
        if r is None:
            raise DispatchInvariantError(f"unknown rider #{rider_id}")
        return r

    def ride(self, ride_id: int) -> RideRequest:
        ride = self.rides.get(ride_id)
        if ride is None:
            raise DispatchInvariantError(f"unknown ride #{ride_id}")
        return ride

    # ---------------- queries ----------------

    def idle_drivers(self, driver_type: DriverType | None = None) -> Iterator[Driver]:
        for d in self.drivers.values():
            if d.is_idle and (driver_type is None or d.type == driver_type):
                yield d

    def busy_drivers(self) -> Iterator[Driver]:
        return (d for d in self.drivers.values() if not d.is_idle)

    def idle_riders(self) -> list[Rider]:
        return [r for r in self.riders.values() if r.status == "idle"]

    def waiting_rides(self, driver_type: DriverType | None = None) -> list[RideRequest]:
        return [
            r
            for r in self.rides.values()
            if r.is_waiting and (driver_type is None or r.driver_type == driver_type)
        ]

    def active_rides(self) -> list[RideRequest]:
        return [r for r in self.rides.values() if r.assigned_driver is not None]

    def driver_status_counts(self) -> dict[str, int]:
        c = Counter(d.status for d in self.drivers.values())
        return {s: c.get(s, 0) for s in ("idle", "going_to_rider", "on_ride")}

    def driver_type_counts(self) -> dict[str, int]:
        c = Counter(d.type for d in self.drivers.values())
        return {s: c.get(s, 0) for s in ("ground", "air")}

    # ---------------- lifecycle ----------------

    def clear(self) -> None:
        """Drop every entity and reset stats and id allocation; simulated time keeps running."""
        self.drivers.clear()
        self.riders.clear()
        self.rides.clear()
        self.completed.clear()
        self.earnings = 0.0
        self.rating = self.initial_rating
        self.total_driver_distance = 0.0
        self.stuck_released = 0
        self.routing_fallbacks = 0
        self.no_driver_events = 0
        self.ids.reset()
