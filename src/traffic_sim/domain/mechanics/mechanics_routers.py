import heapq
import logging
import math

from traffic_sim.app.protocols import Router
from traffic_sim.domain.entities.geography import (
    Intersection,
    Point,
    Route,
    manhattan,
    polyline_length,
)
from traffic_sim.domain.mechanics.mechanics_grid import RoadGrid
from traffic_sim.io.sim_logging import emit

log = logging.getLogger("traffic_sim.routing")


def _grid_route(a: Point, b: Point, nodes: list[Intersection], degraded: bool) -> Route:
    # off-grid first hop is implied by the driver position, last hop is b itself
    waypoints = [n.point for n in nodes] + [b]
    return Route(waypoints, polyline_length(a, waypoints), degraded=degraded)


class DirectRouter(Router):
    """Point-to-point flight, used by air drivers."""

    def route(self, a: Point, b: Point) -> Route:
        return Route([b], a.distance_to(b))


class AStarGridRouter(Router):
    """
    A* over the 4-connected intersection grid.

    Edge cost and heuristic are both the Manhattan world distance, which is
    admissible on an axis-aligned grid. The open set is a heap ordered by
    (f, insertion seq), so equal f-scores resolve first-in-first-out.
    """

    def __init__(self, grid: RoadGrid):
        self.grid = grid

    def find_path(self, start, goal) -> list[Intersection]:
        s = self.grid.nearest_intersection(start.x, start.y)
        g = self.grid.nearest_intersection(goal.x, goal.y)
        if s == g:
            return [s, g]
        path = self._search(s, g)
        if path is None:
            return self._fallback(s, g)
        return path

    def route(self, a: Point, b: Point) -> Route:
        s = self.grid.nearest_intersection(a.x, a.y)
        g = self.grid.nearest_intersection(b.x, b.y)
        if s == g:
            return _grid_route(a, b, [s, g], degraded=False)
        path = self._search(s, g)
        if path is None:
            return _grid_route(a, b, self._fallback(s, g), degraded=True)
        return _grid_route(a, b, path, degraded=False)

    def _fallback(self, s: Intersection, g: Intersection) -> list[Intersection]:
        emit(
            log,
            logging.WARNING,
            "no_path_found",
            start=(s.col, s.row),
            goal=(g.col, g.row),
        )
        return [s, g]

    def _search(self, s: Intersection, g: Intersection) -> list[Intersection] | None:
        seq = 0
        open_heap: list[tuple[float, int, Intersection]] = [(manhattan(s, g), seq, s)]
        g_score: dict[Intersection, float] = {s: 0.0}
        came_from: dict[Intersection, Intersection] = {}
        closed: set[Intersection] = set()

        while open_heap:
            _, _, cur = heapq.heappop(open_heap)
            if cur in closed:
                continue  # stale heap entry
            if cur == g:
                path = [cur]
                while cur in came_from:
                    cur = came_from[cur]
                    path.append(cur)
                path.reverse()
                emit(log, logging.DEBUG, "path_found", hops=len(path) - 1, expanded=len(closed))
                return path
            closed.add(cur)
            for nb in self.grid.neighbors(cur):
                if nb in closed:
                    continue
                tentative = g_score[cur] + manhattan(cur, nb)
                if tentative < g_score.get(nb, math.inf):
                    came_from[nb] = cur
                    g_score[nb] = tentative
                    seq += 1
                    heapq.heappush(open_heap, (tentative + manhattan(nb, g), seq, nb))
        return None


class LShapeGridRouter(Router):
    """Walk along the start row to the goal column, then along that column to the goal row."""

    def __init__(self, grid: RoadGrid):
        self.grid = grid

    def find_path(self, start, goal) -> list[Intersection]:
        s = self.grid.nearest_intersection(start.x, start.y)
        g = self.grid.nearest_intersection(goal.x, goal.y)
        if s == g:
            return [s, g]
        path = [s]
        col, row = s.col, s.row
        while col != g.col:
            col += 1 if col < g.col else -1
            path.append(self.grid.intersection(col, row))
        while row != g.row:
            row += 1 if row < g.row else -1
            path.append(self.grid.intersection(col, row))
        return path

    def route(self, a: Point, b: Point) -> Route:
        return _grid_route(a, b, self.find_path(a, b), degraded=False)
