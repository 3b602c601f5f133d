# main.py
import argparse
import json
import time
from dataclasses import asdict

from traffic_sim.app.build import build
from traffic_sim.sim.clock import FrameTimer


def run(cfg: dict, until: float, *, realtime: bool = False, fps: float = 60.0) -> dict:
    app = build(cfg)
    if realtime:
        # frame-driven loop: wall-clock deltas, scaled by the kernel speed
        timer = FrameTimer()
        timer.delta()
        while app.kernel.now < until:
            time.sleep(1.0 / fps)
            app.kernel.step(timer.delta())
    else:
        app.run(until=until)
    return asdict(app.dispatcher.stats())


def main(argv=None):
    p = argparse.ArgumentParser(description="Headless ride-sharing traffic simulation")
    p.add_argument("--config", help="scenario JSON file")
    p.add_argument("--until", type=float, default=300.0, help="simulated seconds to run")
    p.add_argument("--seed", type=int)
    p.add_argument("--speed", type=float)
    p.add_argument("--realtime", action="store_true")
    args = p.parse_args(argv)

    cfg: dict = {}
    if args.config:
        with open(args.config) as fh:
            cfg = json.load(fh)
    cfg.setdefault("autonomous", {}).setdefault("enabled", True)
    sim = cfg.setdefault("sim", {})
    if args.seed is not None:
        sim["seed"] = args.seed
    if args.speed is not None:
        sim["speed"] = args.speed

    stats = run(cfg, args.until, realtime=args.realtime)
    print(json.dumps(stats, indent=2))


if __name__ == "__main__":
    main()
