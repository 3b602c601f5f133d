# traffic_sim/app/views.py
from dataclasses import dataclass, field

from traffic_sim.domain.entities.driver import Driver
from traffic_sim.domain.entities.ride import RideRequest
from traffic_sim.domain.entities.rider import Rider
from traffic_sim.domain.state import WorldState

XY = tuple[float, float]


# Read-only projections handed to renderers and telemetry
@dataclass(frozen=True)
class DriverView:
    id: int
    type: str
    status: str
    pos: XY
    speed: float
    ride_id: int | None
    target: XY | None
    waypoints: tuple[XY, ...]
    route_index: int
    distance_travelled: float

    @classmethod
    def of(cls, d: Driver) -> "DriverView":
        leg = d.leg
        return cls(
            id=d.id,
            type=d.type,
            status=d.status,
            pos=d.pos.as_tuple(),
            speed=d.speed,
            ride_id=d.ride_id,
            target=d.target.as_tuple() if d.target else None,
            waypoints=tuple(p.as_tuple() for p in leg.waypoints) if leg else (),
            route_index=leg.index if leg else 0,
            distance_travelled=d.distance_travelled,
        )


@dataclass(frozen=True)
class RiderView:
    id: int
    pos: XY
    status: str
    ride_id: int | None

    @classmethod
    def of(cls, r: Rider) -> "RiderView":
        return cls(id=r.id, pos=r.pos.as_tuple(), status=r.status, ride_id=r.ride_id)


@dataclass(frozen=True)
class RideView:
    id: int
    rider_id: int
    driver_type: str
    status: str
    assigned_driver: int | None
    pickup: XY
    dropoff: XY
    fare: int
    distance: float
    created_at: float
    picked_up_at: float | None

    @classmethod
    def of(cls, ride: RideRequest) -> "RideView":
        return cls(
            id=ride.id,
            rider_id=ride.rider_id,
            driver_type=ride.driver_type,
            status=ride.status,
            assigned_driver=ride.assigned_driver,
            pickup=ride.pickup.as_tuple(),
            dropoff=ride.dropoff.as_tuple(),
            fare=ride.fare,
            distance=ride.distance,
            created_at=ride.created_at,
            picked_up_at=ride.picked_up_at,
        )


def _mean(xs) -> float:
    return sum(xs) / len(xs) if xs else 0.0


@dataclass(frozen=True)
class Stats:
    earnings: float
    rating: float
    active_rides: int
    waiting_rides: int
    completed_rides: int
    ride_durations: tuple[float, ...]
    ride_distances: tuple[float, ...]
    avg_ride_duration_s: float
    avg_ride_distance: float
    avg_pickup_distance: float
    total_driver_distance: float
    elapsed_s: float
    ticks: int
    drivers_by_status: dict[str, int] = field(default_factory=dict)
    drivers_by_type: dict[str, int] = field(default_factory=dict)
    stuck_released: int = 0
    routing_fallbacks: int = 0
    no_driver_events: int = 0

    @classmethod
    def of(cls, w: WorldState) -> "Stats":
        durations = tuple(c.duration_s for c in w.completed)
        distances = tuple(c.distance for c in w.completed)
        active = w.active_rides()
        # live distance of each en-route driver from its pickup
        pickup_gaps = [
            w.driver(r.assigned_driver).pos.distance_to(r.pickup)
            for r in active
            if r.status == "going_to_rider"
        ]
        return cls(
            earnings=w.earnings,
            rating=w.rating,
            active_rides=len(active),
            waiting_rides=len(w.waiting_rides()),
            completed_rides=len(w.completed),
            ride_durations=durations,
            ride_distances=distances,
            avg_ride_duration_s=_mean(durations),
            avg_ride_distance=_mean(distances),
            avg_pickup_distance=_mean(pickup_gaps),
            total_driver_distance=w.total_driver_distance,
            elapsed_s=w.t,
            ticks=w.ticks,
            drivers_by_status=w.driver_status_counts(),
            drivers_by_type=w.driver_type_counts(),
            stuck_released=w.stuck_released,
            routing_fallbacks=w.routing_fallbacks,
            no_driver_events=w.no_driver_events,
        )


@dataclass(frozen=True)
class Snapshot:
    t: float
    ticks: int
    drivers: tuple[DriverView, ...]
    riders: tuple[RiderView, ...]
    rides: tuple[RideView, ...]
    stats: Stats

    @classmethod
    def of(cls, w: WorldState) -> "Snapshot":
        return cls(
            t=w.t,
            ticks=w.ticks,
            drivers=tuple(DriverView.of(d) for d in w.drivers.values()),
            riders=tuple(RiderView.of(r) for r in w.riders.values()),
            rides=tuple(RideView.of(r) for r in w.rides.values()),
            stats=Stats.of(w),
        )
