"""
Financial aggregation: allocated demand + decisions -> income statement and cash.

Production is assumed to match demand exactly (no inventory or stockouts).
Monetary figures are rounded half-up to integers and pass through `safe()`
before leaving this module; net income and cash flow are derived from the
rounded figures so that

    ending_cash == beginning_cash + net_income - dividend

holds exactly. Negative cash is a valid outcome and is never clamped.
"""

import logging
from typing import Dict, Iterable

from config import EngineSettings
from src.data_layer.decision_schema import Decision
from src.simulation_layer.models import CellAllocation, FinancialStatement
from src.simulation_layer.numeric import resolve_with_default, round_half_up, safe
from src.simulation_layer.team_profile import TeamProfile

logger = logging.getLogger(__name__)

# Quarterly cost per outlet by channel
OUTLET_COST = {
    "showroom": 75_000,
    "retail": 50_000,
    "online": 25_000,
}

# Cost per internet channel unit
INTERNET_CHANNEL_COST = {
    "web_pages": 5_000,
    "seo": 3_000,
    "paid_search": 8_000,
    "social_media": 6_000,
}

QUARTERS_PER_YEAR = 4


def advertising_expense(decision: Decision) -> float:
    return sum(ad.spend for ad in decision.advertising.values())


def salesforce_expense(decision: Decision, default_compensation: float = 30_000.0) -> float:
    """Headcount x quarterly salary (annual / 4) + training, over all regions."""
    total = 0.0
    for sf in decision.salesforce.values():
        annual = resolve_with_default(sf.compensation, default=default_compensation)
        total += sf.count * annual / QUARTERS_PER_YEAR + sf.training
    return total


def distribution_expense(decision: Decision) -> float:
    return sum(d.outlets * OUTLET_COST[d.channel] for d in decision.distribution.values())


def internet_expense(decision: Decision) -> float:
    internet = decision.internet
    return sum(getattr(internet, channel) * cost for channel, cost in INTERNET_CHANNEL_COST.items())


def operating_spend(decision: Decision, settings: EngineSettings) -> Dict[str, int]:
    """Decision-driven expenses (everything except admin), rounded."""
    return {
        "advertising_expense": round_half_up(advertising_expense(decision)),
        "salesforce_expense": round_half_up(salesforce_expense(decision, settings.default_compensation)),
        "distribution_expense": round_half_up(distribution_expense(decision)),
        "internet_expense": round_half_up(internet_expense(decision)),
        "rd_expense": round_half_up(decision.rd_budget),
    }


class FinancialAggregator:
    """Builds a team's FinancialStatement from the round's cell allocations."""

    def __init__(self, settings: EngineSettings):
        self.settings = settings

    def admin_expense(self, revenue: float, other_expenses: float) -> int:
        """Fixed share of revenue plus flat overhead; a team that did nothing pays none."""
        if revenue <= 0 and other_expenses <= 0:
            return 0
        return round_half_up(revenue * self.settings.admin_revenue_rate + self.settings.admin_overhead)

    def aggregate(
        self,
        profile: TeamProfile,
        cells: Iterable[CellAllocation],
        beginning_cash: float,
    ) -> FinancialStatement:
        team_id = profile.team_id
        units = 0
        revenue = 0.0
        cogs = 0.0
        by_segment: Dict[str, int] = {}
        by_region: Dict[str, int] = {}

        for cell in cells:
            by_segment.setdefault(cell.segment, 0)
            by_region.setdefault(cell.region, 0)
            pull = cell.pulls.get(team_id)
            if pull is None or pull.realized_demand <= 0:
                continue
            sold = pull.realized_demand
            units += sold
            revenue += sold * pull.price
            cogs += sold * pull.unit_cost
            by_segment[cell.segment] += sold
            by_region[cell.region] += sold

        revenue_i = round_half_up(revenue)
        cogs_i = round_half_up(cogs)
        spend = operating_spend(profile.decision, self.settings)
        admin = self.admin_expense(revenue_i, sum(spend.values()))

        gross_profit = revenue_i - cogs_i
        total_expenses = sum(spend.values()) + admin
        operating_profit = gross_profit - total_expenses
        net_income = round_half_up(operating_profit * (1 - self.settings.tax_rate))

        begin = round_half_up(beginning_cash)
        dividend = round_half_up(profile.decision.dividend)
        cash_flow = net_income - dividend
        ending_cash = begin + cash_flow

        if ending_cash < 0:
            logger.info("Team %s ends the round with negative cash (%d)", team_id, ending_cash)

        return FinancialStatement(
            total_demand=units,
            units_sold=units,
            revenue=revenue_i,
            cost_of_goods=cogs_i,
            gross_profit=gross_profit,
            admin_expense=admin,
            total_expenses=total_expenses,
            operating_profit=operating_profit,
            net_income=net_income,
            dividend=dividend,
            cash_flow=cash_flow,
            beginning_cash=begin,
            ending_cash=ending_cash,
            demand_by_segment=by_segment,
            demand_by_region=by_region,
            **spend,
        )


def beginning_cash_for(team, previous_result=None) -> float:
    """Prior round's ending cash when known, else the team's persisted balance."""
    if previous_result is not None:
        ending = getattr(previous_result, "ending_cash", None)
        if ending is None and isinstance(previous_result, dict):
            ending = previous_result.get("ending_cash", previous_result.get("endingCash"))
        if ending is not None:
            return safe(ending, team.cash_balance)
    return safe(team.cash_balance)
