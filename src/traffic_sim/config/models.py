from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] = (2025, 1, 1, 0, 0, 0)
    seed: int = 0
    tick_s: float = Field(default=1 / 60, gt=0)  # fixed frame step for headless runs
    speed: float = Field(default=1.0, gt=0, le=100)  # simulation-speed multiplier


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    record: bool = False  # write business events as JSON lines to stdout


class WorldModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    width: float = Field(default=2400.0, gt=0)
    height: float = Field(default=1600.0, gt=0)
    spawn_margin: float = Field(default=100.0, ge=0)
    # optional weighted spawn/dropoff zones (x0, y0, x1, y1); empty = whole spawn box
    zones: list[tuple[float, float, float, float]] = Field(default_factory=list)
    weights: list[float] | None = None

    @field_validator("weights", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        # [] or "" means uniform
        if v is None or (isinstance(v, (list, tuple, str)) and len(v) == 0):
            return None
        return v

    @model_validator(mode="after")
    def _check_box(self):
        if 2 * self.spawn_margin >= min(self.width, self.height):
            raise ValueError("spawn_margin leaves no room to spawn inside the world")
        if self.weights is None:
            return self
        if not self.zones:
            raise ValueError("weights given without zones")
        if len(self.weights) != len(self.zones):
            raise ValueError(
                f"weights must have length {len(self.zones)}, got {len(self.weights)}"
            )
        if any(not isfinite(float(w)) or w < 0 for w in self.weights):
            raise ValueError("weights must be finite and non-negative")
        if sum(self.weights) <= 0:
            raise ValueError("weights must sum to a positive value")
        return self

    def spawn_box(self) -> tuple[float, float, float, float]:
        m = self.spawn_margin
        return (m, m, self.width - m, self.height - m)


class GridModel(BaseModel):
    """Road centre lines at x_origin + i*x_spacing (vertical) and y_origin + j*y_spacing."""

    model_config = ConfigDict(extra="forbid")
    x_origin: float = 116.0
    x_spacing: float = 140.0
    n_vertical: int = Field(default=16, ge=1)
    y_origin: float = 100.0
    y_spacing: float = 100.0
    n_horizontal: int = Field(default=14, ge=1)
    road_width: float = Field(default=32.0, gt=0)

    @field_validator("x_spacing", "y_spacing")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


# ----------------- ROUTERS ---------------------


class RouterAStarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["astar"] = "astar"


class RouterLShapeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["lshape"] = "lshape"


class RouterDirectModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["direct"] = "direct"


RouterUnion = Annotated[
    RouterAStarModel | RouterLShapeModel | RouterDirectModel,
    Field(discriminator="kind"),
]


class DriverKindModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    speed: float = 150.0  # world units / simulated second
    arrival_eps: float = 10.0
    router: RouterUnion = Field(default_factory=RouterAStarModel)

    @field_validator("speed", "arrival_eps")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class FleetModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    ground: DriverKindModel = Field(default_factory=DriverKindModel)
    air: DriverKindModel = Field(
        default_factory=lambda: DriverKindModel(
            speed=200.0, arrival_eps=20.0, router=RouterDirectModel()
        )
    )

    def for_type(self, driver_type: str) -> DriverKindModel:
        if driver_type == "ground":
            return self.ground
        if driver_type == "air":
            return self.air
        raise ValueError(f"unknown driver type {driver_type!r}")


# ------------------ POLICIES -----------------------------


class PricingPolicyDistanceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["distance"] = "distance"
    rate: float = Field(default=0.1, ge=0)  # fare per world unit
    min_fare: int = Field(default=10, ge=0)


class PricingPolicyFlatModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["flat"] = "flat"
    fare: int = Field(default=10, ge=0)


PricingPolicyUnion = Annotated[
    PricingPolicyDistanceModel | PricingPolicyFlatModel, Field(discriminator="kind")
]


class RatingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["speed_bonus"] = "speed_bonus"
    initial: float = 5.0
    cap: float = 5.0
    expected_s: float = Field(default=30.0, gt=0)
    max_ratio: float = Field(default=2.0, gt=0)
    base_delta: float = 0.5
    slope: float = 0.2
    min_delta: float = Field(default=0.1, ge=0)

    @model_validator(mode="after")
    def _initial_under_cap(self):
        if self.initial > self.cap:
            raise ValueError("initial rating exceeds cap")
        return self


class MatchingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["nearest_idle"] = "nearest_idle"


class DispatchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sweep_every_ticks: int = Field(default=60, ge=1)
    stuck_timeout_s: float = Field(default=30.0, gt=0)


class AutonomousModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = False
    rider_interval_s: float = Field(default=3.0, gt=0)
    driver_interval_s: float = Field(default=5.0, gt=0)
    ride_interval_s: float = Field(default=2.0, gt=0)
    ride_probability: float = Field(default=0.3, ge=0, le=1)
    max_riders: int = Field(default=30, ge=0)
    max_drivers: int = Field(default=20, ge=0)
    max_active_rides: int = Field(default=15, ge=0)
    air_share: float = Field(default=0.0, ge=0, le=1)


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "traffic"
    run_id: str = "local"
    sim: SimModel = Field(default_factory=SimModel)
    log: LogModel = Field(default_factory=LogModel)
    world: WorldModel = Field(default_factory=WorldModel)
    grid: GridModel = Field(default_factory=GridModel)
    fleet: FleetModel = Field(default_factory=FleetModel)
    pricing: PricingPolicyUnion = Field(default_factory=PricingPolicyDistanceModel)
    rating: RatingModel = Field(default_factory=RatingModel)
    matching: MatchingModel = Field(default_factory=MatchingModel)
    dispatch: DispatchModel = Field(default_factory=DispatchModel)
    autonomous: AutonomousModel = Field(default_factory=AutonomousModel)
