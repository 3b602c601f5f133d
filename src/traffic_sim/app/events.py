# app/events.py
from dataclasses import dataclass

from traffic_sim.sim.event import BaseEvent


# Autonomous-mode timers, rescheduled by their handlers
@dataclass(order=True)
class SpawnRiderDue(BaseEvent):
    pass


@dataclass(order=True)
class SpawnDriverDue(BaseEvent):
    pass


@dataclass(order=True)
class RideRequestDue(BaseEvent):
    pass
