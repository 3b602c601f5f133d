# traffic_sim/policy/rating.py
from dataclasses import dataclass

from traffic_sim.app.protocols import RatingPolicy


@dataclass
class SpeedBonusRatingPolicy(RatingPolicy):
    """
    Every completed ride nudges the rating up; faster rides nudge it more.

    ratio = min(duration / expected_s, max_ratio)
    delta = max(min_delta, base_delta - (ratio - 1) * slope)
    """

    expected_s: float = 30.0
    max_ratio: float = 2.0
    base_delta: float = 0.5
    slope: float = 0.2
    min_delta: float = 0.1
    cap: float = 5.0

    def update(self, rating: float, duration_s: float) -> float:
        ratio = min(max(duration_s, 0.0) / self.expected_s, self.max_ratio)
        delta = max(self.min_delta, self.base_delta - (ratio - 1) * self.slope)
        return min(self.cap, rating + delta)
