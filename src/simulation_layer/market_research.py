"""Competitor-visible round summary, reshaped from allocation and results."""

from typing import Dict, Sequence

from src.data_layer.entities import Segment
from src.simulation_layer.attractiveness import resolve_price
from src.simulation_layer.models import (
    CellAllocation,
    CellKey,
    MarketResearch,
    MarketTrends,
    RoundResult,
)
from src.simulation_layer.numeric import safe_ratio
from src.simulation_layer.team_profile import TeamProfile


class MarketResearchGenerator:
    def __init__(self, settings):
        self.settings = settings

    def segment_demands(
        self, segments: Sequence[Segment], cells: Dict[CellKey, CellAllocation]
    ) -> Dict[str, Dict[str, int]]:
        demands = {}
        for segment in segments:
            demands[segment.name] = {}
            for region in self.settings.regions:
                cell = cells.get((segment.name, region))
                demands[segment.name][region] = cell.total_demand if cell else 0
        return demands

    def competitor_prices(self, profiles: Sequence[TeamProfile]) -> Dict[str, Dict[str, float]]:
        """Resolved price of every active brand, by team name then brand name."""
        prices = {}
        for profile in profiles:
            prices[profile.team.name] = {
                bs.brand.name: resolve_price(profile.decision, bs.brand.id, self.settings)
                for bs in profile.brand_scores
            }
        return prices

    def market_trends(
        self,
        round_number: int,
        segments: Sequence[Segment],
        results: Dict[str, RoundResult],
    ) -> MarketTrends:
        units = sum(r.financials.units_sold for r in results.values())
        revenue = sum(r.financials.revenue for r in results.values())
        growth = safe_ratio(sum(s.growth_rate for s in segments), len(segments))
        return MarketTrends(
            round_number=round_number,
            total_industry_demand=sum(r.financials.total_demand for r in results.values()),
            average_price=round(safe_ratio(revenue, units), 2),
            growth_rate=round(growth, 4),
        )

    def generate(
        self,
        round_number: int,
        segments: Sequence[Segment],
        profiles: Sequence[TeamProfile],
        cells: Dict[CellKey, CellAllocation],
        results: Dict[str, RoundResult],
    ) -> MarketResearch:
        brand_judgments = {}
        ad_judgments = {}
        for profile in profiles:
            result = results[profile.team_id]
            brand_judgments[profile.team.name] = {
                "brand_satisfaction": result.satisfaction.brand,
                "overall_satisfaction": result.satisfaction.overall,
            }
            ad_judgments[profile.team.name] = {
                "advertising_expense": result.financials.advertising_expense,
                "ad_satisfaction": result.satisfaction.ad,
            }

        return MarketResearch(
            round_number=round_number,
            segment_demands=self.segment_demands(segments, cells),
            competitor_prices=self.competitor_prices(profiles),
            brand_judgments=brand_judgments,
            ad_judgments=ad_judgments,
            market_trends=self.market_trends(round_number, segments, results),
        )
