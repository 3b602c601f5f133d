# traffic_sim/domain/mechanics/mechanics_factory.py

from traffic_sim.config.models import ScenarioModel
from traffic_sim.domain.entities.driver import DRIVER_TYPES
from traffic_sim.domain.mechanics.mechanics_core import Mechanics
from traffic_sim.domain.mechanics.mechanics_grid import RoadGrid
from traffic_sim.runtime.registries import make_od, make_router
from traffic_sim.sim.rng import RNGRegistry


def build_grid(cfg: ScenarioModel) -> RoadGrid:
    g = cfg.grid
    return RoadGrid.uniform(
        x_origin=g.x_origin,
        x_spacing=g.x_spacing,
        n_vertical=g.n_vertical,
        y_origin=g.y_origin,
        y_spacing=g.y_spacing,
        n_horizontal=g.n_horizontal,
        road_width=g.road_width,
    )


def build_mechanics(cfg: ScenarioModel, rng_registry: RNGRegistry) -> Mechanics:
    rng_od = rng_registry.stream("od")

    grid = build_grid(cfg)
    od_sampler = make_od(cfg.world, deps={"rng": rng_od})
    routers = {
        t: make_router(cfg.fleet.for_type(t).router, deps={"grid": grid}) for t in DRIVER_TYPES
    }
    return Mechanics(grid=grid, od_sampler=od_sampler, routers=routers)
