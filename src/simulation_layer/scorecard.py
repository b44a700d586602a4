"""
Satisfaction scores and the balanced scorecard.

Satisfaction (each 0-1):
    brand   mean targeted fit x 2, capped at 1 (0.3 without targeted brands)
    ad      banded by (advertising + internet) / revenue
    price   mean price attractiveness of targeted brands (0.5 default)
    overall 0.4 brand + 0.2 ad + 0.4 price

Balanced scorecard (0-100), additive-weighted:
    30 financial (30% operating margin -> 1.0, losses go negative)
  + 25 market (0.7 primary share + 0.3 secondary share)
  + 20 marketing effectiveness (overall satisfaction)
  + 10 investment in future ((R&D + distribution) / revenue, 5% -> 1.0)
  + 15 creation of wealth ((cum. profit + cum. investment) / cum. investment, <= 1.5)
The multiplicative variant (product of the normalized components x 100) is
kept behind ``EngineSettings.scoring_model``.
"""

from typing import Dict, Iterable, Sequence, Tuple

from config import EngineSettings
from src.data_layer.entities import Segment
from src.simulation_layer.attractiveness import price_attractiveness, resolve_price
from src.simulation_layer.models import CellAllocation, FinancialStatement, SatisfactionScores, Scorecard
from src.simulation_layer.numeric import clamp, safe, safe_ratio
from src.simulation_layer.segment_fit import fit_score
from src.simulation_layer.team_profile import TeamProfile

NO_BRAND_SATISFACTION = 0.3
NO_REVENUE_AD_SATISFACTION = 0.3
DEFAULT_PRICE_SATISFACTION = 0.5

# (low, high, score) bands for ad spend / revenue, checked in order
AD_SPEND_BANDS = (
    (0.10, 0.20, 0.9),
    (0.05, 0.30, 0.7),
)
AD_SPEND_OTHERWISE = 0.4

TARGET_MARGIN_PCT = 30.0
TARGET_INVESTMENT_PCT = 5.0
MAX_INVESTMENT_PCT = 10.0
MAX_WEALTH = 1.5

WEIGHTS = {
    "financial": 30.0,
    "market": 25.0,
    "marketing": 20.0,
    "investment": 10.0,
    "wealth": 15.0,
}


class ScorecardCalculator:
    def __init__(self, settings: EngineSettings):
        self.settings = settings

    # --------------- Satisfaction ------------------

    def _targeted(self, profile: TeamProfile, segments: Dict[str, Segment]):
        for bs in profile.brand_scores:
            segment = segments.get(bs.target_segment) if bs.target_segment else None
            if segment is not None:
                yield bs, segment

    def brand_satisfaction(self, profile: TeamProfile, segments: Dict[str, Segment]) -> float:
        fits = [fit_score(bs, seg) for bs, seg in self._targeted(profile, segments)]
        if not fits:
            return NO_BRAND_SATISFACTION
        return min(1.0, safe(sum(fits) / len(fits) * 2))

    def ad_satisfaction(self, financials: FinancialStatement) -> float:
        if financials.revenue <= 0:
            return NO_REVENUE_AD_SATISFACTION
        ratio = safe_ratio(
            financials.advertising_expense + financials.internet_expense, financials.revenue
        )
        for low, high, score in AD_SPEND_BANDS:
            if low <= ratio <= high:
                return score
        return AD_SPEND_OTHERWISE

    def price_satisfaction(self, profile: TeamProfile, segments: Dict[str, Segment]) -> float:
        scores = [
            price_attractiveness(resolve_price(profile.decision, bs.brand.id, self.settings), seg, self.settings)
            for bs, seg in self._targeted(profile, segments)
        ]
        if not scores:
            return DEFAULT_PRICE_SATISFACTION
        return safe(sum(scores) / len(scores))

    def satisfaction(
        self,
        profile: TeamProfile,
        segments: Dict[str, Segment],
        financials: FinancialStatement,
    ) -> SatisfactionScores:
        brand = self.brand_satisfaction(profile, segments)
        ad = self.ad_satisfaction(financials)
        price = self.price_satisfaction(profile, segments)
        overall = brand * 0.4 + ad * 0.2 + price * 0.4
        return SatisfactionScores(
            brand=round(brand, 3),
            ad=round(ad, 3),
            price=round(price, 3),
            overall=round(overall, 3),
        )

    # --------------- Market share ------------------

    def market_shares(
        self,
        profile: TeamProfile,
        segments: Sequence[Segment],
        cells: Iterable[CellAllocation],
    ) -> Tuple[float, float]:
        """(primary, secondary): best share among targeted / non-targeted segments."""
        totals: Dict[str, int] = {}
        team_units: Dict[str, int] = {}
        for cell in cells:
            totals[cell.segment] = totals.get(cell.segment, 0) + cell.total_demand
            team_units[cell.segment] = team_units.get(cell.segment, 0) + cell.demand_of(profile.team_id)

        targeted = set(profile.targeted_segments)
        primary = secondary = 0.0
        for segment in segments:
            share = safe_ratio(team_units.get(segment.name, 0), totals.get(segment.name, 0))
            if segment.name in targeted:
                primary = max(primary, share)
            else:
                secondary = max(secondary, share)
        return primary, secondary

    # --------------- Balanced scorecard ------------

    def scorecard(
        self,
        profile: TeamProfile,
        segments: Sequence[Segment],
        cells: Sequence[CellAllocation],
        financials: FinancialStatement,
        satisfaction: SatisfactionScores,
    ) -> Scorecard:
        team = profile.team
        revenue = financials.revenue

        margin_pct = financials.operating_margin * 100
        primary, secondary = self.market_shares(profile, segments, cells)
        market = primary * 0.7 + secondary * 0.3
        investment_pct = min(
            MAX_INVESTMENT_PCT,
            safe_ratio(financials.rd_expense + financials.distribution_expense, revenue) * 100,
        )
        cumulative_investment = safe(team.total_investment)
        cumulative_profit = safe(team.cumulative_profit) + financials.net_income
        wealth = safe_ratio(cumulative_profit + cumulative_investment, cumulative_investment)

        normalized = {
            "financial": min(1.0, margin_pct / TARGET_MARGIN_PCT),
            "market": min(1.0, market),
            "marketing": min(1.0, satisfaction.overall),
            "investment": min(1.0, investment_pct / TARGET_INVESTMENT_PCT),
            "wealth": clamp(wealth, 0.0, MAX_WEALTH),
        }
        if self.settings.scoring_model == "multiplicative":
            product = 1.0
            for name, value in normalized.items():
                product *= max(0.0, value)
            balanced = product * 100
        else:
            balanced = sum(WEIGHTS[name] * value for name, value in normalized.items())

        return Scorecard(
            financial_performance=round(margin_pct, 2),
            market_performance=round(market, 3),
            marketing_effectiveness=round(satisfaction.overall, 3),
            investment_in_future=round(investment_pct, 2),
            creation_of_wealth=round(wealth, 3),
            balanced_scorecard=round(clamp(balanced, 0.0, 100.0), 3),
            market_share_primary=round(primary, 4),
            market_share_secondary=round(secondary, 4),
        )
