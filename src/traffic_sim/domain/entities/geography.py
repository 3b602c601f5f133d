import math
from dataclasses import dataclass


# Core geometry types used by mechanics
@dataclass(frozen=True)
class Point:
    x: float  # world units (pixels of the city map)
    y: float

    def distance_to(self, other: "Point | Intersection") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Intersection:
    """Crossing of vertical road ``col`` and horizontal road ``row``."""

    col: int
    row: int
    x: float
    y: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    def is_adjacent(self, other: "Intersection") -> bool:
        return abs(self.col - other.col) + abs(self.row - other.row) == 1


def manhattan(a, b) -> float:
    return abs(b.x - a.x) + abs(b.y - a.y)


@dataclass
class Route:
    """Waypoints for one leg; the last waypoint is the leg target."""

    waypoints: list[Point]
    length: float
    degraded: bool = False  # router fell back to a direct hop


def polyline_length(start: Point, waypoints: list[Point]) -> float:
    total, prev = 0.0, start
    for p in waypoints:
        total += prev.distance_to(p)
        prev = p
    return total
