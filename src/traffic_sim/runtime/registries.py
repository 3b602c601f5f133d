# runtime/registries.py
from collections.abc import Callable

from traffic_sim.app.protocols import OriginDestinationSampler, Router
from traffic_sim.config.models import (
    RouterAStarModel,
    RouterDirectModel,
    RouterLShapeModel,
    RouterUnion,
    WorldModel,
)
from traffic_sim.domain.mechanics.mechanics_od_samplers import ZoneODSampler
from traffic_sim.domain.mechanics.mechanics_routers import (
    AStarGridRouter,
    DirectRouter,
    LShapeGridRouter,
)

RouterFactory = Callable[[RouterUnion, dict], Router]

_router_registry: dict[str, RouterFactory] = {}


# --------------------- Routers ---------------------


def register_router(kind: str):
    def deco(fn: RouterFactory):
        _router_registry[kind] = fn
        return fn

    return deco


def make_router(cfg: RouterUnion, *, deps: dict) -> Router:
    try:
        factory = _router_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown router kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_router("astar")
def _make_astar(cfg: RouterAStarModel, deps):
    return AStarGridRouter(deps["grid"])


@register_router("lshape")
def _make_lshape(cfg: RouterLShapeModel, deps):
    return LShapeGridRouter(deps["grid"])


@register_router("direct")
def _make_direct(cfg: RouterDirectModel, deps):
    return DirectRouter()


# ----- Origin/Destination Samplers --------------------------


def make_od(cfg: WorldModel, *, deps: dict) -> OriginDestinationSampler:
    # no zones -> one zone covering the spawn box
    zones = list(cfg.zones) or [cfg.spawn_box()]
    weights = cfg.weights if cfg.zones else None
    return ZoneODSampler(zones=zones, weights=weights, rng=deps["rng"])
