# traffic_sim/domain/mechanics/mechanics_core.py
from dataclasses import dataclass, field

from traffic_sim.app.protocols import OriginDestinationSampler, Router
from traffic_sim.domain.entities.geography import Point, Route
from traffic_sim.domain.mechanics.mechanics_grid import RoadGrid
from traffic_sim.domain.mechanics.mechanics_routers import DirectRouter


@dataclass
class Mechanics:
    grid: RoadGrid
    od_sampler: OriginDestinationSampler
    routers: dict[str, Router] = field(default_factory=dict)

    def router_for(self, driver_type: str) -> Router:
        try:
            return self.routers[driver_type]
        except KeyError:
            raise ValueError(f"no router configured for driver type {driver_type!r}") from None

    def route(self, driver_type: str, a: Point, b: Point) -> Route:
        return self.router_for(driver_type).route(a, b)

    def direct(self, a: Point, b: Point) -> Route:
        return DirectRouter().route(a, b)

    def sample_origin(self) -> Point:
        return self.od_sampler.sample_origin()

    def sample_destination(self) -> Point:
        return self.od_sampler.sample_destination()
