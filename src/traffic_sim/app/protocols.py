from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from traffic_sim.domain.entities.driver import Driver
from traffic_sim.domain.entities.geography import Point, Route
from traffic_sim.domain.entities.ride import RideRequest


# ------------- Mechanics --------------------
@runtime_checkable
class OriginDestinationSampler(Protocol):
    """
    Responsibilities:
    • Sample in-bounds spawn positions (origins) and ride dropoffs (destinations).
    Units: world units for coordinates.
    """

    def sample_origin(self) -> Point: ...
    def sample_destination(self) -> Point: ...


@runtime_checkable
class Router(Protocol):
    """
    Responsibilities:
      • Produce the waypoint route a driver follows from ``a`` to ``b``.
      • The final waypoint is always ``b`` itself.
    """

    def route(self, a: Point, b: Point) -> Route: ...


# ------------- Policies --------------------
@runtime_checkable
class MatchingPolicy(Protocol):
    def nearest_driver(
        self, ride: RideRequest, drivers: Iterable[Driver], claimed: set[int] | None = None
    ) -> tuple[Driver, float] | None: ...

    def nearest_ride(
        self, driver: Driver, rides: Iterable[RideRequest], claimed: set[int] | None = None
    ) -> tuple[RideRequest, float] | None: ...

    def match(
        self, rides: Iterable[RideRequest], drivers: Iterable[Driver]
    ) -> list[tuple[RideRequest, Driver, float]]: ...


@runtime_checkable
class PricingPolicy(Protocol):
    def quote(self, pickup: Point, dropoff: Point) -> tuple[int, float]:
        """Return (fare, straight-line distance); raise InvalidCoordinates on non-finite input."""


@runtime_checkable
class RatingPolicy(Protocol):
    def update(self, rating: float, duration_s: float) -> float: ...
