# domain/entities/rider.py
from dataclasses import dataclass
from typing import Literal

from traffic_sim.domain.entities.geography import Point

RiderStatus = Literal["idle", "waiting", "in_ride"]


@dataclass
class Rider:
    id: int
    pos: Point
    status: RiderStatus = "idle"
    ride_id: int | None = None

    def go_idle(self, pos: Point | None = None) -> None:
        self.status = "idle"
        self.ride_id = None
        if pos is not None:
            self.pos = pos
