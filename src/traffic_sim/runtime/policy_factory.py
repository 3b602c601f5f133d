from traffic_sim.app.protocols import MatchingPolicy, PricingPolicy, RatingPolicy
from traffic_sim.config.models import (
    MatchingModel,
    PricingPolicyDistanceModel,
    PricingPolicyFlatModel,
    PricingPolicyUnion,
    RatingModel,
)
from traffic_sim.policy.matching import NearestIdleMatchingPolicy
from traffic_sim.policy.pricing import ConstantPricingPolicy, DistancePricingPolicy
from traffic_sim.policy.rating import SpeedBonusRatingPolicy


def make_matching_policy(cfg: MatchingModel) -> MatchingPolicy:
    if cfg.kind == "nearest_idle":
        return NearestIdleMatchingPolicy()
    else:
        raise TypeError(cfg)


def make_pricing_policy(cfg: PricingPolicyUnion) -> PricingPolicy:
    if isinstance(cfg, PricingPolicyDistanceModel):
        return DistancePricingPolicy(rate=cfg.rate, min_fare=cfg.min_fare)
    elif isinstance(cfg, PricingPolicyFlatModel):
        return ConstantPricingPolicy(fare=cfg.fare)
    else:
        raise TypeError(cfg)


def make_rating_policy(cfg: RatingModel) -> RatingPolicy:
    if cfg.kind == "speed_bonus":
        rp = SpeedBonusRatingPolicy(
            expected_s=cfg.expected_s,
            max_ratio=cfg.max_ratio,
            base_delta=cfg.base_delta,
            slope=cfg.slope,
            min_delta=cfg.min_delta,
            cap=cfg.cap,
        )
        return rp
    else:
        raise TypeError(cfg)
