# traffic_sim/app/wiring.py
from traffic_sim.app.controllers.autonomous import AutoSpawnController
from traffic_sim.app.dispatcher import Dispatcher
from traffic_sim.app.events import RideRequestDue, SpawnDriverDue, SpawnRiderDue
from traffic_sim.sim.kernel import Kernel


def wire(
    kernel: Kernel,
    *,
    dispatcher: Dispatcher,
    autonomous: AutoSpawnController | None = None,
) -> None:
    k = kernel

    # one dispatcher tick per kernel step, after due timers fired
    k.on_tick(dispatcher.tick)

    if autonomous:
        k.on(SpawnRiderDue, autonomous.on_spawn_rider)
        k.on(SpawnDriverDue, autonomous.on_spawn_driver)
        k.on(RideRequestDue, autonomous.on_ride_request)
