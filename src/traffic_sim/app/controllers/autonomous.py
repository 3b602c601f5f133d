# traffic_sim/app/controllers/autonomous.py
from traffic_sim.app.events import RideRequestDue, SpawnDriverDue, SpawnRiderDue
from traffic_sim.config.models import AutonomousModel
from traffic_sim.domain.entities.driver import DriverType
from traffic_sim.sim.event import BaseEvent


class AutoSpawnController:
    """
    Keeps the city populated without user input.

    Each timer reschedules itself one interval (simulated seconds) later, so
    a faster simulation speed spawns proportionally faster in wall time.
    """

    def __init__(self, dispatcher, cfg: AutonomousModel, rng):
        self.dispatcher = dispatcher
        self.cfg = cfg
        self.rng = rng

    def seed(self, t0: float = 0.0) -> list[BaseEvent]:
        return [
            SpawnRiderDue(t=t0 + self.cfg.rider_interval_s),
            SpawnDriverDue(t=t0 + self.cfg.driver_interval_s),
            RideRequestDue(t=t0 + self.cfg.ride_interval_s),
        ]

    def _pick_type(self) -> DriverType:
        if self.cfg.air_share > 0 and self.rng.random() < self.cfg.air_share:
            return "air"
        return "ground"

    def on_spawn_rider(self, ev: SpawnRiderDue):
        if len(self.dispatcher.world.riders) < self.cfg.max_riders:
            self.dispatcher.spawn_rider()
        return [SpawnRiderDue(t=ev.t + self.cfg.rider_interval_s)]

    def on_spawn_driver(self, ev: SpawnDriverDue):
        if len(self.dispatcher.world.drivers) < self.cfg.max_drivers:
            self.dispatcher.spawn_driver(self._pick_type())
        return [SpawnDriverDue(t=ev.t + self.cfg.driver_interval_s)]

    def on_ride_request(self, ev: RideRequestDue):
        # cap counts every outstanding request, matched or not
        if len(self.dispatcher.world.rides) < self.cfg.max_active_rides:
            if self.rng.random() < self.cfg.ride_probability:
                self.dispatcher.request_ride(self._pick_type())
        return [RideRequestDue(t=ev.t + self.cfg.ride_interval_s)]
