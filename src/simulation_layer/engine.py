"""
Quarter-resolution engine.
Turns every team's decisions for one round into demand, financials,
scorecards and the published market research.

Pipeline (all teams resolved together):
1. Score brands (per team profile)
2. Allocate demand per segment/region cell
3. Aggregate financials per team
4. Satisfaction and balanced scorecard per team
5. Market research over all teams

The engine is pure: no I/O, no randomness, no mutation of its input.
Identical RoundInput -> identical RoundOutput.
"""

import logging
from typing import Dict, List, Optional

from config import EngineSettings, get_settings
from src.data_layer.round_input import RoundInput
from src.simulation_layer.demand_allocator import DemandAllocator
from src.simulation_layer.financials import FinancialAggregator, beginning_cash_for
from src.simulation_layer.market_research import MarketResearchGenerator
from src.simulation_layer.models import RoundOutput, RoundResult
from src.simulation_layer.scorecard import ScorecardCalculator
from src.simulation_layer.team_profile import TeamProfile
from src.simulation_layer.trace import RoundTrace

logger = logging.getLogger(__name__)


class QuarterEngine:
    """
    Main round engine.
    Holds only configuration; every call to `resolve_round` is independent.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings().engine
        self.allocator = DemandAllocator(self.settings)
        self.financials = FinancialAggregator(self.settings)
        self.scorer = ScorecardCalculator(self.settings)
        self.research = MarketResearchGenerator(self.settings)

    def build_profiles(self, round_input: RoundInput) -> List[TeamProfile]:
        return [
            TeamProfile.build(team, round_input.decision_for(team.id))
            for team in round_input.teams
        ]

    def resolve_round(
        self,
        round_input: RoundInput,
        trace: Optional[RoundTrace] = None,
    ) -> RoundOutput:
        """
        Resolve one round for all teams.

        Args:
            round_input: Snapshot of teams, segments and decisions.
            trace: Optional observer collecting per-cell events.

        Returns:
            RoundOutput with one RoundResult per team, the market research
            and every cell allocation.
        """
        round_number = round_input.round_number
        segments = round_input.segments
        segments_by_name = {s.name: s for s in segments}
        profiles = self.build_profiles(round_input)

        cells = self.allocator.allocate(segments, round_number, profiles, trace)
        cell_list = list(cells.values())

        results: Dict[str, RoundResult] = {}
        for profile in profiles:
            team = profile.team
            previous = round_input.previous_results.get(team.id)
            statement = self.financials.aggregate(
                profile, cell_list, beginning_cash_for(team, previous)
            )
            satisfaction = self.scorer.satisfaction(profile, segments_by_name, statement)
            scorecard = self.scorer.scorecard(profile, segments, cell_list, statement, satisfaction)
            results[team.id] = RoundResult(
                team_id=team.id,
                team_name=team.name,
                round_number=round_number,
                financials=statement,
                satisfaction=satisfaction,
                scorecard=scorecard,
            )

        market_research = self.research.generate(round_number, segments, profiles, cells, results)

        logger.info(
            "Round %d resolved: %d teams, %d cells, industry demand %d",
            round_number,
            len(results),
            len(cell_list),
            market_research.market_trends.total_industry_demand,
        )
        for result in results.values():
            logger.debug(
                "  %s: units=%d revenue=%d net=%d cash=%d score=%.2f",
                result.team_name,
                result.financials.units_sold,
                result.financials.revenue,
                result.net_income,
                result.ending_cash,
                result.balanced_scorecard,
            )

        return RoundOutput(results=results, market_research=market_research, cells=cell_list)


def resolve_round(
    round_input: RoundInput,
    settings: Optional[EngineSettings] = None,
    trace: Optional[RoundTrace] = None,
) -> RoundOutput:
    """Module-level shortcut: resolve one round with a fresh engine."""
    return QuarterEngine(settings).resolve_round(round_input, trace)
