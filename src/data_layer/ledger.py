"""
In-memory game ledger: the writer side around the quarter engine.

Collects decisions for the current round, decides when a round may be
resolved, and applies each RoundOutput exactly once:
- team cash becomes the round's ending cash
- cumulative profit accrues net income
- submission flags reset for the next round
- results are appended to history, never rewritten
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from config import GameSettings
from src.data_layer.decision_schema import Decision, normalize_decision
from src.data_layer.entities import Segment, Team
from src.data_layer.errors import RoundInputError, RoundSequenceError
from src.data_layer.round_input import RoundInput, validate_round_input
from src.simulation_layer.models import MarketResearch, RoundOutput, RoundResult

logger = logging.getLogger(__name__)


class GameLedger:
    """Round bookkeeping for one game."""

    def __init__(
        self,
        teams: Iterable[Team],
        segments: Iterable[Segment],
        settings: Optional[GameSettings] = None,
    ):
        self.teams: List[Team] = list(teams)
        self.segments: List[Segment] = list(segments)
        self.settings = settings or GameSettings()
        self.current_round = 1
        self.decisions: Dict[str, Decision] = {}
        self.history: List[RoundResult] = []
        self.research: Dict[int, MarketResearch] = {}
        self._last_results: Dict[str, RoundResult] = {}

    # ---------------- Queries ----------------

    @property
    def is_finished(self) -> bool:
        return self.current_round > self.settings.max_rounds

    def team(self, team_id: str) -> Team:
        for team in self.teams:
            if team.id == team_id:
                return team
        raise RoundInputError(f"Unknown team: {team_id!r}")

    def pending_teams(self) -> List[Team]:
        return [t for t in self.teams if not t.has_submitted]

    def is_ready(self) -> bool:
        """True when every team has submitted for the current round."""
        return not self.pending_teams()

    def results_for(self, team_id: str) -> List[RoundResult]:
        return [r for r in self.history if r.team_id == team_id]

    # ---------------- Decisions ----------------

    def submit(self, team_id: str, decision: Any, final: bool = True) -> Decision:
        """Store a team's decision for the current round.

        A draft (``final=False``) may be replaced freely; a final submit may
        not be repeated within the same round.
        """
        if self.is_finished:
            raise RoundSequenceError("Game is finished")
        team = self.team(team_id)
        if team.has_submitted:
            raise RoundSequenceError(
                f"Team {team_id!r} already submitted for round {self.current_round}"
            )
        normalized = normalize_decision(decision, team.active_brands)
        self.decisions[team_id] = normalized
        if final:
            team.has_submitted = True
            logger.info("Team %s submitted round %d", team.name, self.current_round)
        return normalized

    # ---------------- Rounds ----------------

    def round_input(self) -> RoundInput:
        """Snapshot for the current round; teams without a decision play an empty one."""
        round_input = RoundInput(
            round_number=self.current_round,
            teams=self.teams,
            segments=self.segments,
            decisions=dict(self.decisions),
            previous_results=dict(self._last_results),
        )
        validate_round_input(round_input)
        return round_input

    def check_ready(self, force: bool = False) -> None:
        if self.is_finished:
            raise RoundSequenceError(f"Game already finished after round {self.settings.max_rounds}")
        if not force and not self.is_ready():
            waiting = ", ".join(t.name for t in self.pending_teams())
            raise RoundSequenceError(f"Waiting for submissions from: {waiting}")

    def apply(self, output: RoundOutput) -> None:
        """Apply a resolved round to team state. Rounds must arrive in order, once each."""
        round_number = output.market_research.round_number
        if round_number != self.current_round:
            raise RoundSequenceError(
                f"Expected results for round {self.current_round}, got round {round_number}"
            )
        for team in self.teams:
            if team.id not in output.results:
                raise RoundSequenceError(f"Round {round_number} has no result for team {team.id!r}")

        for team in self.teams:
            result = output.results[team.id]
            team.cash_balance = result.ending_cash
            team.cumulative_profit += result.net_income
            team.has_submitted = False
            self.history.append(result)

        self.research[round_number] = output.market_research
        self._last_results = dict(output.results)
        self.decisions = {}
        self.current_round += 1
        logger.info("Round %d applied; next round %d", round_number, self.current_round)

    def advance(self, engine, force: bool = False) -> RoundOutput:
        """Resolve the current round with `engine` and apply it."""
        self.check_ready(force)
        if force and not self.is_ready():
            logger.warning(
                "Forcing round %d without: %s",
                self.current_round,
                ", ".join(t.name for t in self.pending_teams()),
            )
        output = engine.resolve_round(self.round_input())
        self.apply(output)
        return output
