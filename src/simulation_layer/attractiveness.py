"""
Attractiveness factors: decisions -> bounded, unitless pull multipliers.

Four independent curves, each deterministic:
- price attractiveness vs. the segment's price band
- advertising reach (regional media + a share of internet marketing)
- sales-force effectiveness
- distribution coverage (a hard gate: zero outlets -> zero)
"""

import math
from typing import Optional

from config import EngineSettings
from src.data_layer.decision_schema import Decision
from src.data_layer.entities import Segment
from src.simulation_layer.numeric import clamp, resolve_with_default, safe, safe_ratio

# Reach contributed per internet channel unit
INTERNET_REACH_WEIGHTS = {
    "web_pages": 200.0,
    "seo": 150.0,
    "paid_search": 300.0,
    "social_media": 250.0,
}
# Internet marketing is assumed spread across three regions
INTERNET_REGION_SPLIT = 3.0

CHANNEL_MULTIPLIER = {
    "showroom": 1.3,
    "retail": 1.0,
    "online": 0.9,
}

NO_BRAND_PRICE_ATTRACTIVENESS = 0.5
PRICE_FLOOR = 0.1
SALES_FLOOR = 0.1

_DEFAULTS = EngineSettings.model_construct()


def resolve_price(
    decision: Decision,
    brand_id: Optional[str],
    settings: EngineSettings = _DEFAULTS,
) -> float:
    """Brand price -> team default price -> fixed fallback."""
    return resolve_with_default(
        decision.price_for(brand_id),
        decision.default_price,
        default=settings.fallback_price,
    )


def price_attractiveness(
    price: float,
    segment: Segment,
    settings: EngineSettings = _DEFAULTS,
) -> float:
    """Score a price against the segment's band, in [0.1, 1.0].

    Prices outside 0.7x min .. 1.5x max score the floor. Inside, the score
    falls with relative distance from the band midpoint, scaled by the
    segment's price sensitivity. Value pricing (min <= price < midpoint)
    earns a 10% bonus, still capped at 1.0.
    """
    price = safe(price)
    low, high = segment.min_price, segment.max_price
    if price < low * 0.7 or price > high * 1.5:
        return PRICE_FLOOR

    mid = segment.price_midpoint
    deviation = safe_ratio(abs(price - mid), mid)
    score = max(PRICE_FLOOR, 1 - deviation * segment.price_sensitivity * settings.price_steepness)

    if low <= price < mid:
        return min(1.0, score * settings.value_pricing_bonus)
    return min(1.0, score)


def internet_reach_units(decision: Decision) -> float:
    internet = decision.internet
    return sum(getattr(internet, channel) * weight for channel, weight in INTERNET_REACH_WEIGHTS.items())


def ad_reach(
    decision: Decision,
    segment_name: str,
    region: str,
    settings: EngineSettings = _DEFAULTS,
) -> float:
    """Square-root diminishing returns on media spend, in [0.15, 1.2]."""
    ad = decision.advertising_in(region)
    total_spend = ad.spend + internet_reach_units(decision) / INTERNET_REGION_SPLIT
    effectiveness = min(1.0, math.sqrt(safe_ratio(total_spend, settings.ad_saturation_spend)))
    if ad.target_segment is not None and ad.target_segment == segment_name:
        effectiveness *= settings.ad_targeting_bonus
    return clamp(effectiveness, settings.ad_floor, settings.factor_cap)


def sales_effectiveness(
    decision: Decision,
    region: str,
    settings: EngineSettings = _DEFAULTS,
) -> float:
    """Coverage (saturating near `salesforce_saturation` heads) x quality, capped at 1.2."""
    sf = decision.salesforce_in(region)
    if sf.count <= 0:
        return SALES_FLOOR

    coverage = min(1.0, math.sqrt(sf.count / settings.salesforce_saturation))
    compensation = resolve_with_default(sf.compensation, default=settings.default_compensation)
    quality = 0.7 + (compensation / 60_000) * 0.2 + (sf.training / 10_000) * 0.1
    return min(settings.factor_cap, safe(coverage * quality))


def distribution_coverage(
    decision: Decision,
    region: str,
    settings: EngineSettings = _DEFAULTS,
) -> float:
    """Coverage (saturating near `distribution_saturation` outlets) x channel, capped at 1.2."""
    dist = decision.distribution_in(region)
    if dist.outlets <= 0:
        return 0.0

    coverage = min(1.0, math.sqrt(dist.outlets / settings.distribution_saturation))
    return min(settings.factor_cap, coverage * CHANNEL_MULTIPLIER[dist.channel])
