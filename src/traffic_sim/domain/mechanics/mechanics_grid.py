from collections.abc import Iterator, Sequence

import numpy as np

from traffic_sim.domain.entities.geography import Intersection


class RoadGrid:
    """
    Fixed rectangular road grid.

    Vertical roads run along ``x = xs[col]`` and horizontal roads along
    ``y = ys[row]``; every (col, row) pair is an intersection and the
    4-neighbourhood in index space gives the road graph. The grid is immutable
    after construction and each intersection object is created once.
    """

    def __init__(self, xs: Sequence[float], ys: Sequence[float], road_width: float = 32.0):
        self.xs = np.asarray(xs, dtype=float)
        self.ys = np.asarray(ys, dtype=float)
        if self.xs.ndim != 1 or self.ys.ndim != 1 or not len(self.xs) or not len(self.ys):
            raise ValueError("grid needs at least one vertical and one horizontal road")
        if not (np.isfinite(self.xs).all() and np.isfinite(self.ys).all()):
            raise ValueError("road coordinates must be finite")
        if np.any(np.diff(self.xs) <= 0) or np.any(np.diff(self.ys) <= 0):
            raise ValueError("road coordinates must be strictly increasing")
        if road_width <= 0:
            raise ValueError("road_width must be > 0")
        self.road_width = float(road_width)
        self.half_width = self.road_width / 2
        self._nodes = {
            (c, r): Intersection(c, r, float(x), float(y))
            for c, x in enumerate(self.xs)
            for r, y in enumerate(self.ys)
        }

    @classmethod
    def uniform(
        cls,
        *,
        x_origin: float,
        x_spacing: float,
        n_vertical: int,
        y_origin: float,
        y_spacing: float,
        n_horizontal: int,
        road_width: float = 32.0,
    ) -> "RoadGrid":
        xs = x_origin + x_spacing * np.arange(n_vertical)
        ys = y_origin + y_spacing * np.arange(n_horizontal)
        return cls(xs, ys, road_width)

    @classmethod
    def from_roads(cls, xs, ys, road_width: float = 32.0) -> "RoadGrid":
        return cls(xs, ys, road_width)

    @property
    def n_cols(self) -> int:
        return len(self.xs)

    @property
    def n_rows(self) -> int:
        return len(self.ys)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Intersection]:
        return iter(self._nodes.values())

    def intersection(self, col: int, row: int) -> Intersection:
        if not (0 <= col < self.n_cols and 0 <= row < self.n_rows):
            raise IndexError(
                f"intersection ({col}, {row}) outside {self.n_cols}x{self.n_rows} grid"
            )
        return self._nodes[(col, row)]

    def nearest_intersection(self, x: float, y: float) -> Intersection:
        # nearest vertical and horizontal road chosen independently; argmin keeps the first on ties
        col = int(np.argmin(np.abs(self.xs - x)))
        row = int(np.argmin(np.abs(self.ys - y)))
        return self._nodes[(col, row)]

    def neighbors(self, node: Intersection) -> list[Intersection]:
        out = []
        c, r = node.col, node.row
        for dc, dr in ((0, -1), (0, 1), (-1, 0), (1, 0)):  # up, down, left, right
            nc, nr = c + dc, r + dr
            if 0 <= nc < self.n_cols and 0 <= nr < self.n_rows:
                out.append(self._nodes[(nc, nr)])
        return out

    def is_on_road(self, x: float, y: float) -> bool:
        return bool(
            np.any(np.abs(self.ys - y) < self.half_width)
            or np.any(np.abs(self.xs - x) < self.half_width)
        )
