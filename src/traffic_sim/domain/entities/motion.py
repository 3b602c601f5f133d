from dataclasses import dataclass

from traffic_sim.domain.entities.geography import Point, Route


def step_toward(pos: Point, target: Point, dist: float) -> Point:
    d = pos.distance_to(target)
    if d <= dist or d == 0:
        return target
    f = dist / d
    return Point(pos.x + f * (target.x - pos.x), pos.y + f * (target.y - pos.y))


@dataclass
class Leg:
    """
    One driver leg (to pickup or to dropoff).

    ``route`` is computed lazily by the tick loop and discarded whenever the
    driver's status changes; ``index`` points at the next waypoint.
    """

    target: Point
    route: Route | None = None
    index: int = 0

    @property
    def waypoints(self) -> list[Point]:
        return self.route.waypoints if self.route is not None else []

    @property
    def done(self) -> bool:
        return self.route is not None and self.index >= len(self.route.waypoints)

    def current_waypoint(self) -> Point | None:
        if self.route is None or self.done:
            return None
        return self.route.waypoints[self.index]

    def advance(self, pos: Point, budget: float, eps: float) -> tuple[Point, float]:
        """
        Spend up to ``budget`` world units moving along the remaining waypoints.

        A waypoint within ``eps`` counts as reached and the pointer moves on;
        unused budget carries over to the next waypoint. Returns the new
        position and the distance actually travelled.
        """
        travelled = 0.0
        wps = self.waypoints
        while self.index < len(wps):
            wp = wps[self.index]
            d = pos.distance_to(wp)
            if d <= eps:
                self.index += 1
                continue
            left = budget - travelled
            if left <= 0:
                break
            if left >= d:
                pos, travelled = wp, travelled + d
                self.index += 1
                continue
            pos = step_toward(pos, wp, left)
            travelled = budget
            break
        return pos, travelled
