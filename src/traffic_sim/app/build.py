# traffic_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from traffic_sim.app.controllers.autonomous import AutoSpawnController
from traffic_sim.app.controllers.demand import DemandHandler
from traffic_sim.app.controllers.fleet import FleetHandler
from traffic_sim.app.controllers.idle import IdleHandler
from traffic_sim.app.controllers.trips import TripHandler
from traffic_sim.app.dispatcher import Dispatcher
from traffic_sim.app.wiring import wire
from traffic_sim.config.models import ScenarioModel
from traffic_sim.domain.mechanics.mechanics_core import Mechanics
from traffic_sim.domain.mechanics.mechanics_factory import build_mechanics
from traffic_sim.domain.state import WorldState
from traffic_sim.io.recorder import JsonlSink, Recorder
from traffic_sim.io.sim_logging import SimLogging
from traffic_sim.runtime.policy_factory import (
    make_matching_policy,
    make_pricing_policy,
    make_rating_policy,
)
from traffic_sim.sim.clock import SimClock
from traffic_sim.sim.hooks import NoopHooks
from traffic_sim.sim.kernel import Kernel
from traffic_sim.sim.rng import RNGRegistry


@dataclass
class App:
    model: ScenarioModel
    kernel: Kernel
    clock: SimClock
    rng: RNGRegistry
    world: WorldState
    mechanics: Mechanics
    dispatcher: Dispatcher
    recorder: Recorder
    autonomous: AutoSpawnController | None = None

    def run(self, until: float, dt: float | None = None) -> int:
        return self.kernel.run(until=until, dt=dt or self.model.sim.tick_s)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    worker: int = 0,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch)
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name, worker=worker)

    # 2) Kernel (with hooks)
    if recorder is None:
        recorder = Recorder(JsonlSink()) if model.log.record else Recorder()
    hooks = (
        SimLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks, speed=model.sim.speed)

    # 3) World, mechanics & policies
    world = WorldState(
        width=model.world.width,
        height=model.world.height,
        initial_rating=model.rating.initial,
    )
    mechanics = build_mechanics(model, rng_registry=rng_registry)
    matching_policy = make_matching_policy(model.matching)
    pricing_policy = make_pricing_policy(model.pricing)
    rating_policy = make_rating_policy(model.rating)

    # 4) Handlers (inject deps explicitly)
    idle = IdleHandler(
        world, matching_policy, stuck_timeout_s=model.dispatch.stuck_timeout_s, hooks=hooks
    )
    fleet = FleetHandler(world, mechanics, model.fleet, idle, hooks=hooks)
    demand = DemandHandler(
        world, mechanics, pricing_policy, idle, rng=rng_registry.stream("demand"), hooks=hooks
    )
    trips = TripHandler(world, mechanics, model.fleet, rating_policy, hooks=hooks)
    dispatcher = Dispatcher(
        world,
        fleet=fleet,
        demand=demand,
        trips=trips,
        idle=idle,
        sweep_every_ticks=model.dispatch.sweep_every_ticks,
    )

    autonomous = None
    if model.autonomous.enabled:
        autonomous = AutoSpawnController(
            dispatcher, model.autonomous, rng=rng_registry.stream("autonomous")
        )

    # 5) Wiring
    wire(kernel, dispatcher=dispatcher, autonomous=autonomous)

    # 6) Seed autonomous timers
    if autonomous:
        for ev in autonomous.seed(kernel.now):
            kernel.schedule(ev)

    return App(
        model, kernel, clock, rng_registry, world, mechanics, dispatcher, recorder, autonomous
    )
