"""
Segment fit: which of a team's brands best serves a segment, and how well.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from src.data_layer.entities import BENEFITS, Segment
from src.simulation_layer.brand_scorer import BrandScore
from src.simulation_layer.numeric import safe

UNTARGETED_PENALTY = 0.6


@dataclass(frozen=True)
class BrandFit:
    """The winning brand for a segment and its (possibly penalized) fit score."""

    brand_score: BrandScore
    score: float
    targeted: bool

    @property
    def brand(self):
        return self.brand_score.brand


def fit_score(brand_score: BrandScore, segment: Segment) -> float:
    """Weighted dot product of benefit scores against the segment's weights."""
    weights = segment.weights()
    return safe(sum(getattr(brand_score, b) * safe(weights[b]) for b in BENEFITS))


def best_brand_fit(
    segment: Segment,
    brand_scores: Iterable[BrandScore],
    penalty: float = UNTARGETED_PENALTY,
) -> Optional[BrandFit]:
    """Pick the team's best brand for `segment`.

    Brands targeting the segment compete on raw fit. Only when none target it
    are all brands scored with the flat `penalty`. The first brand encountered
    wins exact ties. Returns None when the team has no brands.
    """
    candidates: List[BrandScore] = list(brand_scores)
    if not candidates:
        return None

    best: Optional[BrandFit] = None
    for bs in candidates:
        if bs.target_segment != segment.name:
            continue
        score = fit_score(bs, segment)
        if best is None or score > best.score:
            best = BrandFit(brand_score=bs, score=score, targeted=True)
    if best is not None:
        return best

    for bs in candidates:
        score = fit_score(bs, segment) * penalty
        if best is None or score > best.score:
            best = BrandFit(brand_score=bs, score=score, targeted=False)
    return best


def targets_segment(brand_scores: Iterable[BrandScore], segment_name: str) -> bool:
    return any(bs.target_segment == segment_name for bs in brand_scores)
