"""
Shared data models for the simulation layer.

Everything here is produced by the quarter engine and is immutable once
produced: results are appended to history, never mutated.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

CellKey = Tuple[str, str]  # (segment name, region)


@dataclass(frozen=True)
class TeamPull:
    """One team's competitive strength in one segment/region cell."""

    team_id: str
    targeting: float
    brand_id: Optional[str]
    fit_score: float
    fit_targeted: bool
    price: float
    unit_cost: float
    price_attractiveness: float
    ad_reach: float
    sales_effectiveness: float
    distribution_coverage: float
    pull: float
    share: float = 0.0
    realized_demand: int = 0


@dataclass(frozen=True)
class CellAllocation:
    """Demand allocation for one (segment, region) cell."""

    segment: str
    region: str
    adjusted_potential: int
    total_pull: float
    demand_creation_ratio: float
    total_demand: int
    pulls: Dict[str, TeamPull] = field(default_factory=dict)

    @property
    def key(self) -> CellKey:
        return (self.segment, self.region)

    def share_of(self, team_id: str) -> float:
        pull = self.pulls.get(team_id)
        return pull.share if pull else 0.0

    def demand_of(self, team_id: str) -> int:
        pull = self.pulls.get(team_id)
        return pull.realized_demand if pull else 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FinancialStatement:
    """A team's quarterly income statement and cash movement (integer currency)."""

    total_demand: int
    units_sold: int
    revenue: int
    cost_of_goods: int
    gross_profit: int
    advertising_expense: int
    salesforce_expense: int
    distribution_expense: int
    internet_expense: int
    rd_expense: int
    admin_expense: int
    total_expenses: int
    operating_profit: int
    net_income: int
    dividend: int
    cash_flow: int
    beginning_cash: int
    ending_cash: int
    demand_by_segment: Dict[str, int] = field(default_factory=dict)
    demand_by_region: Dict[str, int] = field(default_factory=dict)

    @property
    def operating_margin(self) -> float:
        return self.operating_profit / self.revenue if self.revenue > 0 else 0.0


@dataclass(frozen=True)
class SatisfactionScores:
    brand: float
    ad: float
    price: float
    overall: float


@dataclass(frozen=True)
class Scorecard:
    """Balanced scorecard components and the composite 0-100 score."""

    financial_performance: float  # operating margin, %
    market_performance: float
    marketing_effectiveness: float
    investment_in_future: float  # (R&D + distribution) / revenue, %
    creation_of_wealth: float
    balanced_scorecard: float
    market_share_primary: float
    market_share_secondary: float


@dataclass(frozen=True)
class RoundResult:
    """One team's full outcome for one round."""

    team_id: str
    team_name: str
    round_number: int
    financials: FinancialStatement
    satisfaction: SatisfactionScores
    scorecard: Scorecard

    @property
    def ending_cash(self) -> int:
        return self.financials.ending_cash

    @property
    def net_income(self) -> int:
        return self.financials.net_income

    @property
    def balanced_scorecard(self) -> float:
        return self.scorecard.balanced_scorecard

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_record(self) -> Dict[str, Any]:
        """Flat row (one column per figure) for tabular history."""
        record = {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "round_number": self.round_number,
        }
        for name, value in asdict(self.financials).items():
            if not isinstance(value, dict):
                record[name] = value
        for name, value in asdict(self.satisfaction).items():
            record[f"{name}_satisfaction"] = value
        record.update(asdict(self.scorecard))
        return record


@dataclass(frozen=True)
class MarketTrends:
    round_number: int
    total_industry_demand: int
    average_price: float
    growth_rate: float


@dataclass(frozen=True)
class MarketResearch:
    """Competitor-visible summary of one round."""

    round_number: int
    segment_demands: Dict[str, Dict[str, int]]
    competitor_prices: Dict[str, Dict[str, float]]
    brand_judgments: Dict[str, Dict[str, Any]]
    ad_judgments: Dict[str, Dict[str, Any]]
    market_trends: MarketTrends

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RoundOutput:
    results: Dict[str, RoundResult]
    market_research: MarketResearch
    cells: List[CellAllocation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": {team_id: r.to_dict() for team_id, r in self.results.items()},
            "market_research": self.market_research.to_dict(),
            "cells": [c.to_dict() for c in self.cells],
        }
