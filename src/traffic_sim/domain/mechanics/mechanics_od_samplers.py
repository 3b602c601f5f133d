import numpy as np

from traffic_sim.app.protocols import OriginDestinationSampler
from traffic_sim.domain.entities.geography import Point


class ZoneODSampler(OriginDestinationSampler):
    """Uniform points inside weighted rectangular zones (x0, y0, x1, y1)."""

    def __init__(
        self,
        *,
        zones: list[tuple[float, float, float, float]],
        weights: list[float] | None = None,
        rng: np.random.Generator,
    ):
        if not zones:
            raise ValueError("at least one zone is required")
        self.zones = list(zones)
        self.rng = rng
        self._p = None if weights is None else self._normalize_weights(weights, len(self.zones))

    @staticmethod
    def _normalize_weights(weights, n):
        w = np.asarray(weights, dtype=float)
        if w.shape != (n,):
            raise ValueError(f"zone weights must have length {n}, got {w.shape[0]}")
        if not np.isfinite(w).all():
            bad = np.where(~np.isfinite(w))[0]
            raise ValueError(f"zone weights must be finite; bad indices: {bad.tolist()}")
        s = w.sum()
        if s <= 0:
            raise ValueError("zone weights must sum to a positive value")
        return w / s

    def _pick(self):
        if self._p is None:
            idx = self.rng.integers(0, len(self.zones))
        else:
            idx = self.rng.choice(len(self.zones), p=self._p)
        return self.zones[int(idx)]

    def _uniform(self, rect) -> Point:
        x0, y0, x1, y1 = rect
        return Point(float(self.rng.uniform(x0, x1)), float(self.rng.uniform(y0, y1)))

    def sample_origin(self) -> Point:
        return self._uniform(self._pick())

    def sample_destination(self) -> Point:
        return self._uniform(self._pick())
