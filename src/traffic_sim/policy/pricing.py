# traffic_sim/policy/pricing.py
import math

from traffic_sim.app.protocols import PricingPolicy
from traffic_sim.domain.entities.geography import Point
from traffic_sim.domain.errors import InvalidCoordinates


def _checked_distance(pickup: Point, dropoff: Point) -> float:
    if not (pickup.is_finite() and dropoff.is_finite()):
        raise InvalidCoordinates(f"non-finite ride coordinates {pickup} -> {dropoff}")
    dist = pickup.distance_to(dropoff)
    if not math.isfinite(dist):
        raise InvalidCoordinates(f"ride distance overflowed for {pickup} -> {dropoff}")
    return dist


class DistancePricingPolicy(PricingPolicy):
    """fare = max(min_fare, round(distance * rate)), rounding halves up."""

    def __init__(self, rate: float = 0.1, min_fare: int = 10):
        self.rate = rate
        self.min_fare = min_fare

    def quote(self, pickup: Point, dropoff: Point) -> tuple[int, float]:
        dist = _checked_distance(pickup, dropoff)
        fare = math.floor(dist * self.rate + 0.5)
        return max(self.min_fare, fare), dist


class ConstantPricingPolicy(PricingPolicy):
    def __init__(self, fare: int = 10):
        self.fare = fare

    def quote(self, pickup: Point, dropoff: Point) -> tuple[int, float]:
        return self.fare, _checked_distance(pickup, dropoff)
