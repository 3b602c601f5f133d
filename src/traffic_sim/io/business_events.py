# io/business_events.py

from dataclasses import dataclass


# Analytics events (never scheduled on the kernel)
@dataclass
class BizEvent:
    t: float  # simulation time


@dataclass
class DriverSpawned(BizEvent):
    driver_id: int
    driver_type: str
    pos: tuple[float, float]


@dataclass
class RiderSpawned(BizEvent):
    rider_id: int
    pos: tuple[float, float]


@dataclass
class RideRequested(BizEvent):
    ride_id: int
    rider_id: int
    driver_type: str
    pickup: tuple[float, float]
    dropoff: tuple[float, float]
    fare: int
    distance: float


@dataclass
class RideAssigned(BizEvent):
    ride_id: int
    driver_id: int
    pickup_distance: float


@dataclass
class RiderPickedUp(BizEvent):
    ride_id: int
    driver_id: int
    rider_id: int
    wait_s: float


@dataclass
class RideCompleted(BizEvent):
    ride_id: int
    driver_id: int
    rider_id: int
    fare: int
    duration_s: float
    distance: float
    rating: float


@dataclass
class RideReleased(BizEvent):
    ride_id: int
    driver_id: int | None
    rider_id: int
    status: str
    age_s: float
