"""
Demand allocation: splits each (segment, region) cell's demand across teams.

Every team's share depends on every other team's pull, so a cell is resolved
for all teams at once. Cells are independent of each other; iteration order
(segments, then regions, in input order) does not change any result.

Per cell:
1. adjusted potential = base x (1 + growth x (round - 1)) x seasonality[round]
2. targeting gate per team (0 / 0.3 spillover / 1.0); gate 0 excludes the team
3. pull = gate x fit x price x ad reach x sales x distribution (multiplicative)
4. demand creation ratio = min(1.5, total pull / max(1, n_teams x 0.3))
5. total demand = round(adjusted potential x ratio)
6. share = pull / total pull; realized demand = round(total demand x share)
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from config import EngineSettings
from src.data_layer.entities import Segment
from src.simulation_layer.attractiveness import (
    ad_reach,
    distribution_coverage,
    price_attractiveness,
    resolve_price,
    sales_effectiveness,
    NO_BRAND_PRICE_ATTRACTIVENESS,
)
from src.simulation_layer.models import CellAllocation, CellKey, TeamPull
from src.simulation_layer.numeric import round_half_up, safe, safe_ratio
from src.simulation_layer.segment_fit import best_brand_fit, targets_segment
from src.simulation_layer.team_profile import TeamProfile
from src.simulation_layer.trace import RoundTrace

logger = logging.getLogger(__name__)


class DemandAllocator:
    """Resolves every segment/region cell of a round."""

    def __init__(self, settings: EngineSettings):
        self.settings = settings

    def seasonality(self, round_number: int) -> float:
        curve = self.settings.seasonality
        if not curve:
            return 1.0
        return curve[(round_number - 1) % len(curve)]

    def adjusted_potential(self, segment: Segment, region: str, round_number: int) -> int:
        base = segment.potential_for(region, self.settings.default_potential_demand)
        growth = 1 + segment.growth_rate * (round_number - 1)
        return round_half_up(base * growth * self.seasonality(round_number))

    def targeting_strength(self, profile: TeamProfile, segment: Segment, region: str) -> float:
        """1.0 with a targeting brand and outlets, 0.3 spillover with outlets only, else 0."""
        if profile.decision.outlets_in(region) <= 0:
            return 0.0
        if targets_segment(profile.brand_scores, segment.name):
            return 1.0
        return self.settings.spillover_targeting

    def team_pull(
        self, profile: TeamProfile, segment: Segment, region: str, targeting: float
    ) -> TeamPull:
        s = self.settings
        decision = profile.decision
        fit = best_brand_fit(segment, profile.brand_scores, penalty=s.untargeted_fit_penalty)

        if fit is None:
            brand_id, fit_score, unit_cost = None, 0.0, s.fallback_unit_cost
            price = resolve_price(decision, None, s)
            price_score = NO_BRAND_PRICE_ATTRACTIVENESS
        else:
            brand_id, fit_score, unit_cost = fit.brand.id, fit.score, fit.brand.unit_cost
            price = resolve_price(decision, brand_id, s)
            price_score = price_attractiveness(price, segment, s)

        reach = ad_reach(decision, segment.name, region, s)
        sales = sales_effectiveness(decision, region, s)
        coverage = distribution_coverage(decision, region, s)
        pull = safe(targeting * fit_score * price_score * reach * sales * coverage)

        return TeamPull(
            team_id=profile.team_id,
            targeting=targeting,
            brand_id=brand_id,
            fit_score=fit_score,
            fit_targeted=bool(fit and fit.targeted),
            price=price,
            unit_cost=unit_cost,
            price_attractiveness=price_score,
            ad_reach=reach,
            sales_effectiveness=sales,
            distribution_coverage=coverage,
            pull=pull,
        )

    def allocate_cell(
        self,
        segment: Segment,
        region: str,
        round_number: int,
        profiles: Sequence[TeamProfile],
        trace: Optional[RoundTrace] = None,
    ) -> CellAllocation:
        s = self.settings
        potential = self.adjusted_potential(segment, region, round_number)

        pulls: List[TeamPull] = []
        for profile in profiles:
            targeting = self.targeting_strength(profile, segment, region)
            if targeting <= 0:
                if trace is not None:
                    trace.skipped(segment.name, region, profile.team_id, "no distribution")
                continue
            pulls.append(self.team_pull(profile, segment, region, targeting))

        total_pull = safe(sum(p.pull for p in pulls))
        baseline = max(1.0, len(profiles) * s.pull_per_team_baseline)
        ratio = min(s.max_demand_creation, safe_ratio(total_pull, baseline))
        total_demand = round_half_up(potential * ratio)

        allocated: Dict[str, TeamPull] = {}
        for p in pulls:
            share = safe_ratio(p.pull, total_pull)
            allocated[p.team_id] = replace(
                p, share=share, realized_demand=round_half_up(total_demand * share)
            )
            if trace is not None:
                trace.pulled(segment.name, region, allocated[p.team_id])

        cell = CellAllocation(
            segment=segment.name,
            region=region,
            adjusted_potential=potential,
            total_pull=total_pull,
            demand_creation_ratio=ratio,
            total_demand=total_demand,
            pulls=allocated,
        )
        if trace is not None:
            trace.allocated(cell)
        logger.debug(
            "Cell %s/%s: potential=%d pull=%.4f demand=%d",
            segment.name, region, potential, total_pull, total_demand,
        )
        return cell

    def allocate(
        self,
        segments: Sequence[Segment],
        round_number: int,
        profiles: Sequence[TeamProfile],
        trace: Optional[RoundTrace] = None,
    ) -> Dict[CellKey, CellAllocation]:
        cells: Dict[CellKey, CellAllocation] = {}
        for segment in segments:
            for region in self.settings.regions:
                cell = self.allocate_cell(segment, region, round_number, profiles, trace)
                cells[cell.key] = cell
        return cells
