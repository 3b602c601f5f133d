# domain/entities/driver.py
from dataclasses import dataclass, field
from typing import ClassVar, Literal

from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.motion import Leg

DriverType = Literal["ground", "air"]
DriverStatus = Literal["idle", "going_to_rider", "on_ride"]
DRIVER_TYPES: tuple[DriverType, ...] = ("ground", "air")


@dataclass
class Idle:
    status: ClassVar[DriverStatus] = "idle"


@dataclass
class GoingToRider:
    ride_id: int
    leg: Leg
    status: ClassVar[DriverStatus] = "going_to_rider"


@dataclass
class OnRide:
    ride_id: int
    leg: Leg
    status: ClassVar[DriverStatus] = "on_ride"


DriverState = Idle | GoingToRider | OnRide


@dataclass
class Driver:
    id: int
    pos: Point
    type: DriverType = "ground"  # ground follows the road grid, air flies direct
    speed: float = 150.0
    state: DriverState = field(default_factory=Idle)
    distance_travelled: float = 0.0

    @property
    def status(self) -> DriverStatus:
        return self.state.status

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    @property
    def ride_id(self) -> int | None:
        return None if isinstance(self.state, Idle) else self.state.ride_id

    @property
    def leg(self) -> Leg | None:
        return None if isinstance(self.state, Idle) else self.state.leg

    @property
    def target(self) -> Point | None:
        leg = self.leg
        return leg.target if leg else None

    def go_to_rider(self, ride_id: int, pickup: Point) -> None:
        self.state = GoingToRider(ride_id=ride_id, leg=Leg(target=pickup))

    def start_ride(self, ride_id: int, dropoff: Point) -> None:
        self.state = OnRide(ride_id=ride_id, leg=Leg(target=dropoff))

    def go_idle(self) -> None:
        self.state = Idle()
