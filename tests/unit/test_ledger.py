"""
Tests for round bookkeeping around the engine.
"""

import pytest

from config import GameSettings
from src.data_layer.errors import RoundInputError, RoundSequenceError
from src.data_layer.ledger import GameLedger
from tests.builders import make_brand, make_segment, make_team


def new_ledger(max_rounds=8):
    teams = [
        make_team("t1", [make_brand("b1", "t1")]),
        make_team("t2", [make_brand("b2", "t2")]),
    ]
    return GameLedger(teams, [make_segment()], GameSettings(max_rounds=max_rounds))


DECISION = {
    "pricing": {"b1": 800, "b2": 800},
    "advertising": {"latam": {"spend": 200_000, "target_segment": "Worker"}},
    "distribution": {"latam": {"outlets": 10, "channel": "retail"}},
    "salesforce": {"latam": {"count": 5}},
    "dividend": 1_000,
}


class TestSubmissions:
    def test_ready_only_when_all_submitted(self):
        ledger = new_ledger()
        assert not ledger.is_ready()
        ledger.submit("t1", DECISION)
        assert [t.id for t in ledger.pending_teams()] == ["t2"]
        ledger.submit("t2", DECISION)
        assert ledger.is_ready()

    def test_draft_does_not_count(self):
        ledger = new_ledger()
        ledger.submit("t1", DECISION, final=False)
        ledger.submit("t1", {"rd_budget": 5}, final=False)
        assert ledger.decisions["t1"].rd_budget == 5
        assert not ledger.team("t1").has_submitted

    def test_double_submit_rejected(self):
        ledger = new_ledger()
        ledger.submit("t1", DECISION)
        with pytest.raises(RoundSequenceError):
            ledger.submit("t1", DECISION)

    def test_unknown_team(self):
        with pytest.raises(RoundInputError):
            new_ledger().submit("t9", DECISION)


class TestAdvance:
    def test_refuses_until_ready(self, engine):
        ledger = new_ledger()
        ledger.submit("t1", DECISION)
        with pytest.raises(RoundSequenceError, match="Waiting"):
            ledger.advance(engine)
        assert ledger.current_round == 1

    def test_forced_advance_plays_empty_decisions(self, engine):
        ledger = new_ledger()
        ledger.submit("t1", DECISION)
        output = ledger.advance(engine, force=True)
        idle = output.results["t2"]
        assert idle.financials.units_sold == 0
        assert idle.ending_cash == idle.financials.beginning_cash

    def test_applies_cash_and_profit(self, engine):
        ledger = new_ledger()
        for team_id in ("t1", "t2"):
            ledger.submit(team_id, DECISION)
        output = ledger.advance(engine)

        t1 = ledger.team("t1")
        assert t1.cash_balance == output.results["t1"].ending_cash
        assert t1.cumulative_profit == output.results["t1"].net_income
        assert not t1.has_submitted
        assert ledger.current_round == 2
        assert ledger.decisions == {}
        assert len(ledger.history) == 2
        assert ledger.research[1] is output.market_research

    def test_cash_carries_between_rounds(self, engine):
        ledger = new_ledger()
        for _ in range(3):
            for team_id in ("t1", "t2"):
                ledger.submit(team_id, DECISION)
            ledger.advance(engine)
        results = ledger.results_for("t1")
        assert [r.round_number for r in results] == [1, 2, 3]
        for before, after in zip(results, results[1:]):
            assert after.financials.beginning_cash == before.ending_cash

    def test_same_output_cannot_be_applied_twice(self, engine):
        ledger = new_ledger()
        output = ledger.advance(engine, force=True)
        with pytest.raises(RoundSequenceError, match="Expected results for round 2"):
            ledger.apply(output)

    def test_game_ends_after_max_rounds(self, engine):
        ledger = new_ledger(max_rounds=2)
        ledger.advance(engine, force=True)
        ledger.advance(engine, force=True)
        assert ledger.is_finished
        with pytest.raises(RoundSequenceError):
            ledger.advance(engine, force=True)
        with pytest.raises(RoundSequenceError):
            ledger.submit("t1", DECISION)
