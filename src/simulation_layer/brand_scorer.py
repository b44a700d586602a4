"""
Brand scoring: component qualities -> normalized benefit scores.

Each benefit is a fixed weighted combination of 2-4 components divided by the
maximum single-component value (5), so every score lands in [0, 1].
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from src.data_layer.entities import BENEFITS, MAX_COMPONENT, Brand, clamp_component
from src.simulation_layer.numeric import clamp

# R&D investment above this unlocks the larger customization bonus
RD_CUSTOMIZATION_THRESHOLD = 500_000


@dataclass(frozen=True)
class BrandScore:
    """A brand with its six benefit scores."""

    brand: Brand
    performance: float
    durability: float
    style: float
    comfort: float
    lightweight: float
    customization: float

    def scores(self) -> Dict[str, float]:
        return {benefit: getattr(self, benefit) for benefit in BENEFITS}

    @property
    def target_segment(self):
        return self.brand.target_segment


def score_brand(brand: Brand) -> BrandScore:
    """Score one brand. Pure; out-of-range components are clamped, not rejected."""
    q = {name: clamp_component(value, default=0) for name, value in brand.components().items()}
    top = float(MAX_COMPONENT)

    performance = (q["drivetrain"] * 0.4 + q["frame"] * 0.3 + q["wheels"] * 0.3) / top
    durability = (q["frame"] * 0.4 + q["brakes"] * 0.3 + q["wheels"] * 0.3) / top
    style = (
        q["frame"] * 0.3
        + q["handlebars"] * 0.3
        + q["seat"] * 0.2
        + (0.2 if q["electronics"] > 0 else 0.0)
    ) / top
    comfort = (q["seat"] * 0.4 + q["suspension"] * 0.3 + q["handlebars"] * 0.3) / top
    lightweight = (q["frame"] * 0.5 + q["wheels"] * 0.3 + q["drivetrain"] * 0.2) / top
    rd_bonus = 0.3 if brand.rd_investment > RD_CUSTOMIZATION_THRESHOLD else 0.1
    customization = (q["electronics"] * 0.3 + rd_bonus) / top

    return BrandScore(
        brand=brand,
        performance=clamp(performance, 0.0, 1.0),
        durability=clamp(durability, 0.0, 1.0),
        style=clamp(style, 0.0, 1.0),
        comfort=clamp(comfort, 0.0, 1.0),
        lightweight=clamp(lightweight, 0.0, 1.0),
        customization=clamp(customization, 0.0, 1.0),
    )


def score_brands(brands: Iterable[Brand]) -> List[BrandScore]:
    """Score active brands, preserving input order (fit tie-breaks depend on it)."""
    return [score_brand(b) for b in brands if b.is_active]
