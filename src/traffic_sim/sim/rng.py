# sim/rng.py
from __future__ import annotations

from functools import cache
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


class RNGRegistry:
    """
    Deterministic registry of numpy.random.Generator streams.

    Streams used by the simulator:
      "od"          spawn positions and ride dropoffs
      "demand"      which idle rider requests a ride
      "autonomous"  auto-spawn coin flips and driver/ride type draws
    Two registries built with the same (seed, scenario, worker) hand out
    identical streams regardless of the order they are requested in.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0, worker: int = 0):
        self.master_seed = _u32(master_seed)
        self.scenario_tag = _crc32_u32(str(scenario))
        self.worker = _u32(worker)

    @cache
    def stream(self, name: str) -> np.random.Generator:
        ss = np.random.SeedSequence(
            entropy=[self.master_seed, self.scenario_tag, self.worker, _crc32_u32(name)]
        )
        return np.random.Generator(np.random.PCG64(ss))
