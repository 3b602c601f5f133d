# tests/domain/test_grid_routing.py
import logging
import math

import numpy as np
import pytest

from traffic_sim.domain.entities.geography import Point, manhattan, polyline_length
from traffic_sim.domain.mechanics.mechanics_grid import RoadGrid
from traffic_sim.domain.mechanics.mechanics_routers import (
    AStarGridRouter,
    DirectRouter,
    LShapeGridRouter,
)


@pytest.fixture
def city():
    return RoadGrid.uniform(
        x_origin=116, x_spacing=140, n_vertical=16, y_origin=100, y_spacing=100, n_horizontal=14
    )


class ClosedRoads(RoadGrid):
    """Grid where every road segment is closed."""

    def neighbors(self, node):
        return []


def test_find_path_to_self():
    router = AStarGridRouter(RoadGrid.from_roads([100, 240], [100, 200]))
    path = router.find_path(Point(100, 100), Point(100, 100))
    assert [(n.x, n.y) for n in path] == [(100, 100), (100, 100)]


def test_find_path_on_two_by_two_grid():
    router = AStarGridRouter(RoadGrid.from_roads([100, 240], [100, 200]))
    path = [(n.x, n.y) for n in router.find_path(Point(100, 100), Point(240, 200))]
    assert path in (
        [(100, 100), (240, 100), (240, 200)],
        [(100, 100), (100, 200), (240, 200)],
    )


def test_paths_are_connected_and_manhattan_optimal(city):
    router = AStarGridRouter(city)
    rng = np.random.default_rng(3)
    for _ in range(200):
        a = Point(*rng.uniform((0, 0), (2400, 1600)))
        b = Point(*rng.uniform((0, 0), (2400, 1600)))
        path = router.find_path(a, b)
        s, g = city.nearest_intersection(a.x, a.y), city.nearest_intersection(b.x, b.y)
        assert path[0] == s
        assert path[-1] == g
        if s == g:
            assert path == [s, s]
            continue
        assert all(p.is_adjacent(q) for p, q in zip(path, path[1:]))
        hops = abs(s.col - g.col) + abs(s.row - g.row)
        assert len(path) == hops + 1
        world_len = sum(manhattan(p, q) for p, q in zip(path, path[1:]))
        assert world_len == pytest.approx(manhattan(s, g))


def test_route_ends_at_exact_target(city):
    router = AStarGridRouter(city)
    a, b = Point(130, 120), Point(700, 730)
    route = router.route(a, b)
    assert route.waypoints[-1] == b
    assert route.waypoints[0] == city.nearest_intersection(a.x, a.y).point
    assert route.length == pytest.approx(polyline_length(a, route.waypoints))
    assert not route.degraded
    assert route.waypoints[-2] == city.nearest_intersection(b.x, b.y).point


def test_exhausted_search_falls_back_to_direct_pair(caplog):
    grid = ClosedRoads.from_roads([100, 240, 380], [100, 200])
    router = AStarGridRouter(grid)
    with caplog.at_level(logging.WARNING, logger="traffic_sim.routing"):
        path = router.find_path(Point(100, 100), Point(380, 200))
        route = router.route(Point(100, 100), Point(380, 200))
    assert [(n.x, n.y) for n in path] == [(100, 100), (380, 200)]
    assert route.degraded
    assert route.waypoints[-1] == Point(380, 200)
    assert [r.getMessage() for r in caplog.records].count("no_path_found") == 2


def test_lshape_router_walks_columns_then_rows(city):
    router = LShapeGridRouter(city)
    path = router.find_path(Point(116, 100), Point(536, 400))
    cols = [n.col for n in path]
    rows = [n.row for n in path]
    assert cols == [0, 1, 2, 3, 3, 3, 3]
    assert rows == [0, 0, 0, 0, 1, 2, 3]
    route = router.route(Point(116, 100), Point(536, 400))
    assert route.length == pytest.approx(420 + 300)


def test_lshape_router_goes_backwards(city):
    path = LShapeGridRouter(city).find_path(Point(536, 400), Point(116, 100))
    assert [(n.col, n.row) for n in path][:2] == [(3, 3), (2, 3)]
    assert (path[-1].col, path[-1].row) == (0, 0)


def test_direct_router():
    route = DirectRouter().route(Point(0, 0), Point(300, 400))
    assert route.waypoints == [Point(300, 400)]
    assert route.length == pytest.approx(500.0)
    assert math.isclose(route.length, Point(0, 0).distance_to(Point(300, 400)))
