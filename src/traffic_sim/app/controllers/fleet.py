# traffic_sim/app/controllers/fleet.py
import logging
import math

from traffic_sim.app.controllers.idle import IdleHandler
from traffic_sim.config.models import FleetModel
from traffic_sim.domain.entities.driver import Driver, DriverType
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.entities.rider import Rider
from traffic_sim.domain.errors import InvalidCoordinates
from traffic_sim.domain.mechanics.mechanics_core import Mechanics
from traffic_sim.domain.state import WorldState
from traffic_sim.io.business_events import DriverSpawned, RiderSpawned
from traffic_sim.io.sim_logging import emit
from traffic_sim.sim.hooks import KernelHooks, NoopHooks

log = logging.getLogger("traffic_sim.fleet")


class FleetHandler:
    def __init__(
        self,
        world: WorldState,
        mechanics: Mechanics,
        fleet: FleetModel,
        idle: IdleHandler,
        hooks: KernelHooks | None = None,
    ):
        self.world = world
        self.mechanics = mechanics
        self.fleet = fleet
        self.idle = idle
        self.hooks = hooks or NoopHooks()

    def _spawn_point(self, pos: Point | None) -> Point:
        p = pos if pos is not None else self.mechanics.sample_origin()
        if not p.is_finite():
            raise InvalidCoordinates(f"non-finite spawn position {p}")
        return p

    def spawn_driver(
        self,
        driver_type: DriverType = "ground",
        pos: Point | None = None,
        speed: float | None = None,
    ) -> Driver:
        kind = self.fleet.for_type(driver_type)
        v = kind.speed if speed is None else float(speed)
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"driver speed must be > 0, got {speed}")
        d = Driver(
            id=self.world.ids.next("driver"),
            pos=self._spawn_point(pos),
            type=driver_type,
            speed=v,
        )
        self.world.add_driver(d)
        emit(
            log,
            logging.INFO,
            "driver_spawned",
            t=self.world.t,
            driver_id=d.id,
            driver_type=d.type,
            pos=d.pos.as_tuple(),
        )
        self.hooks.biz(
            DriverSpawned(t=self.world.t, driver_id=d.id, driver_type=d.type, pos=d.pos.as_tuple())
        )
        # don't make waiting rides sit until the next sweep
        self.idle.on_driver_available(d)
        return d

    def spawn_rider(self, pos: Point | None = None) -> Rider:
        r = Rider(id=self.world.ids.next("rider"), pos=self._spawn_point(pos))
        self.world.add_rider(r)
        emit(
            log, logging.INFO, "rider_spawned", t=self.world.t, rider_id=r.id, pos=r.pos.as_tuple()
        )
        self.hooks.biz(RiderSpawned(t=self.world.t, rider_id=r.id, pos=r.pos.as_tuple()))
        return r
