"""
Tests for satisfaction scores, market shares and the balanced scorecard.
"""

import pytest

from config import EngineSettings
from src.data_layer.decision_schema import Decision
from src.simulation_layer.models import CellAllocation, FinancialStatement, SatisfactionScores, TeamPull
from src.simulation_layer.scorecard import ScorecardCalculator
from src.simulation_layer.segment_fit import fit_score
from src.simulation_layer.team_profile import TeamProfile
from tests.builders import make_brand, make_decision, make_team


def statement(**figures):
    values = {name: 0 for name in FinancialStatement.__dataclass_fields__
              if name not in ("demand_by_segment", "demand_by_region")}
    values.update(figures)
    return FinancialStatement(**values)


def cell(segment, total, demands):
    pulls = {
        team_id: TeamPull(
            team_id=team_id, targeting=1.0, brand_id=None, fit_score=0.0, fit_targeted=False,
            price=0.0, unit_cost=0.0, price_attractiveness=0.5, ad_reach=0.15,
            sales_effectiveness=0.1, distribution_coverage=0.0, pull=0.0,
            share=units / total if total else 0.0, realized_demand=units,
        )
        for team_id, units in demands.items()
    }
    return CellAllocation(segment=segment, region="latam", adjusted_potential=total, total_pull=1.0,
                          demand_creation_ratio=1.0, total_demand=total, pulls=pulls)


class TestSatisfaction:
    def setup_method(self):
        self.calc = ScorecardCalculator(EngineSettings())

    def test_no_brands_defaults(self, worker):
        p = TeamProfile.build(make_team(), Decision())
        s = self.calc.satisfaction(p, {"Worker": worker}, statement())
        assert (s.brand, s.ad, s.price) == (0.3, 0.3, 0.5)
        assert s.overall == pytest.approx(0.38)

    def test_brand_satisfaction_doubles_fit(self, worker):
        p = TeamProfile.build(make_team(brands=[make_brand()]), Decision())
        expected = min(1.0, fit_score(p.brand_scores[0], worker) * 2)
        assert self.calc.brand_satisfaction(p, {"Worker": worker}) == pytest.approx(expected)

    def test_brand_targeting_missing_segment_counts_as_untargeted(self, worker):
        p = TeamProfile.build(make_team(brands=[make_brand(target_segment="Gone")]), Decision())
        assert self.calc.brand_satisfaction(p, {"Worker": worker}) == 0.3
        assert self.calc.price_satisfaction(p, {"Worker": worker}) == 0.5

    @pytest.mark.parametrize("ad,revenue,expected", [
        (15_000, 100_000, 0.9),
        (10_000, 100_000, 0.9),
        (6_000, 100_000, 0.7),
        (30_000, 100_000, 0.7),
        (1_000, 100_000, 0.4),
        (90_000, 100_000, 0.4),
        (90_000, 0, 0.3),
    ])
    def test_ad_satisfaction_bands(self, ad, revenue, expected):
        assert self.calc.ad_satisfaction(statement(advertising_expense=ad, revenue=revenue)) == expected

    def test_internet_counts_toward_ad_ratio(self):
        s = statement(advertising_expense=5_000, internet_expense=10_000, revenue=100_000)
        assert self.calc.ad_satisfaction(s) == 0.9

    def test_price_satisfaction_uses_brand_price(self, worker):
        p = TeamProfile.build(make_team(brands=[make_brand()]), make_decision(price=800))
        assert self.calc.price_satisfaction(p, {"Worker": worker}) == pytest.approx(1.0)


class TestMarketShares:
    def test_primary_and_secondary(self, worker, youth):
        calc = ScorecardCalculator(EngineSettings())
        p = TeamProfile.build(make_team(brands=[make_brand()]), Decision())
        cells = [cell("Worker", 100, {"t1": 40, "t2": 60}), cell("Youth", 50, {"t1": 25})]
        assert calc.market_shares(p, [worker, youth], cells) == (0.4, 0.5)

    def test_empty_market(self, worker):
        calc = ScorecardCalculator(EngineSettings())
        p = TeamProfile.build(make_team(brands=[make_brand()]), Decision())
        assert calc.market_shares(p, [worker], [cell("Worker", 0, {})]) == (0.0, 0.0)


class TestBalancedScorecard:
    def test_idle_team(self, worker):
        calc = ScorecardCalculator(EngineSettings())
        p = TeamProfile.build(make_team(), Decision())
        sat = SatisfactionScores(brand=0.3, ad=0.3, price=0.5, overall=0.38)
        card = calc.scorecard(p, [worker], [], statement(), sat)
        # marketing 20 x 0.38 + wealth 15 x 1.0
        assert card.balanced_scorecard == pytest.approx(22.6)
        assert card.financial_performance == 0
        assert card.creation_of_wealth == pytest.approx(1.0)

    def test_strong_team_is_capped_at_100(self, worker, youth):
        calc = ScorecardCalculator(EngineSettings())
        team = make_team(brands=[make_brand()], cumulative_profit=10_000_000)
        p = TeamProfile.build(team, Decision())
        cells = [cell("Worker", 100, {"t1": 100}), cell("Youth", 50, {"t1": 50})]
        s = statement(revenue=1_000_000, operating_profit=500_000, net_income=375_000, rd_expense=100_000)
        sat = SatisfactionScores(brand=1.0, ad=0.9, price=1.0, overall=0.98)
        card = calc.scorecard(p, [worker, youth], cells, s, sat)
        assert card.balanced_scorecard == 100
        assert card.market_share_primary == 1.0
        assert card.investment_in_future == 10.0

    def test_moderate_loss_counts_against_score(self, worker):
        calc = ScorecardCalculator(EngineSettings())
        p = TeamProfile.build(make_team(brands=[make_brand()]), Decision())
        cells = [cell("Worker", 100, {"t1": 100})]
        s = statement(revenue=1_000_000, operating_profit=-150_000, net_income=-112_500,
                      distribution_expense=20_000)
        sat = SatisfactionScores(brand=0.6, ad=0.4, price=1.0, overall=0.72)
        card = calc.scorecard(p, [worker], cells, s, sat)
        assert card.financial_performance == pytest.approx(-15.0)
        # -15% margin is -0.5 of the 30% target; wealth (5M - 112.5k) / 5M
        expected = 30 * -0.5 + 25 * 0.7 + 20 * 0.72 + 10 * 0.4 + 15 * 0.9775
        assert card.balanced_scorecard == pytest.approx(expected, abs=1e-3)

    def test_deep_loss_clamps_to_zero(self, worker):
        calc = ScorecardCalculator(EngineSettings())
        p = TeamProfile.build(make_team(brands=[make_brand()]), Decision())
        cells = [cell("Worker", 100, {"t1": 100})]
        s = statement(revenue=10_000, operating_profit=-1_000_000, net_income=-750_000, distribution_expense=500_000)
        sat = SatisfactionScores(brand=0.6, ad=0.4, price=1.0, overall=0.72)
        card = calc.scorecard(p, [worker], cells, s, sat)
        assert card.financial_performance == -10_000
        assert card.balanced_scorecard == 0

    def test_multiplicative_model(self, worker):
        calc = ScorecardCalculator(EngineSettings(scoring_model="multiplicative"))
        p = TeamProfile.build(make_team(), Decision())
        sat = SatisfactionScores(brand=0.3, ad=0.3, price=0.5, overall=0.38)
        assert calc.scorecard(p, [worker], [], statement(), sat).balanced_scorecard == 0
