# domain/entities/ride.py
from dataclasses import dataclass
from typing import Literal

from traffic_sim.domain.entities.driver import DriverType
from traffic_sim.domain.entities.geography import Point

RideStatus = Literal["waiting_for_pickup", "going_to_rider", "in_ride"]


@dataclass
class RideRequest:
    id: int
    rider_id: int
    pickup: Point
    dropoff: Point
    fare: int
    distance: float  # straight-line pickup -> dropoff
    created_at: float
    driver_type: DriverType = "ground"
    assigned_driver: int | None = None  # set iff status != waiting_for_pickup
    status: RideStatus = "waiting_for_pickup"
    picked_up_at: float | None = None

    @property
    def is_waiting(self) -> bool:
        return self.status == "waiting_for_pickup"

    def age(self, now: float) -> float:
        return now - self.created_at

    def assign(self, driver_id: int) -> None:
        self.assigned_driver = driver_id
        self.status = "going_to_rider"
