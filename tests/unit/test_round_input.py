"""
Tests for assembling a RoundInput from stored records.
"""

import json

import pytest

from src.data_layer.decision_schema import Decision
from src.data_layer.errors import RoundInputError
from src.data_layer.round_input import load_round_input, load_round_input_file


def payload(**overrides):
    data = {
        "round": 2,
        "teams": [
            {"id": "t1", "name": "Alpha", "brands": [{"id": "b1", "name": "Nova", "target_segment": "Worker"}]},
            {"id": "t2", "name": "Beta"},
        ],
        "segments": [{"name": "Worker", "min_price": 600, "max_price": 1000}],
        "decisions": {"t1": {"pricing": {"Nova": 800}, "distribution": {"latam": 5}}},
    }
    data.update(overrides)
    return data


class TestLoadRoundInput:
    def test_builds_typed_snapshot(self):
        ri = load_round_input(payload())
        assert ri.round_number == 2
        assert [t.id for t in ri.teams] == ["t1", "t2"]
        assert ri.segment_named("Worker").max_price == 1000
        assert ri.decision_for("t1").pricing == {"b1": 800}
        assert ri.decision_for("t1").outlets_in("latam") == 5

    def test_missing_decision_is_empty(self):
        assert load_round_input(payload()).decision_for("t2") == Decision()

    def test_quarter_key_accepted(self):
        data = payload()
        data["quarter"] = data.pop("round")
        assert load_round_input(data).round_number == 2

    @pytest.mark.parametrize("bad", [0, -1, None, "soon"])
    def test_invalid_round(self, bad):
        with pytest.raises(RoundInputError):
            load_round_input(payload(round=bad))

    def test_unknown_target_segment(self):
        data = payload()
        data["teams"][0]["brands"][0]["target_segment"] = "Mars"
        with pytest.raises(RoundInputError, match="unknown segment"):
            load_round_input(data)

    def test_duplicate_segments(self):
        with pytest.raises(RoundInputError, match="Duplicate segment"):
            load_round_input(payload(segments=[{"name": "Worker"}, {"name": "Worker"}]))

    def test_decision_for_unknown_team(self):
        with pytest.raises(RoundInputError, match="unknown teams"):
            load_round_input(payload(decisions={"t9": {}}))

    def test_malformed_decision(self):
        with pytest.raises(RoundInputError, match="Malformed decision"):
            load_round_input(payload(decisions={"t1": {"advertising": {"latam": ["a", "b"]}}}))

    def test_scalar_pricing_plays_default_price(self):
        ri = load_round_input(payload(decisions={"t1": {"pricing": 950, "distribution": {"latam": 5}}}))
        assert ri.decision_for("t1").pricing == {}
        assert ri.decision_for("t1").outlets_in("latam") == 5

    def test_non_mapping_decision(self):
        with pytest.raises(RoundInputError, match="Malformed decision"):
            load_round_input(payload(decisions={"t1": 950}))

    def test_team_without_id(self):
        with pytest.raises(RoundInputError, match="Missing required field"):
            load_round_input(payload(teams=[{"name": "Anonymous"}]))

    def test_previous_results_kept(self):
        ri = load_round_input(payload(previous_results={"t1": {"ending_cash": 123}}))
        assert ri.previous_results["t1"]["ending_cash"] == 123


def test_load_from_file(tmp_path):
    path = tmp_path / "round.json"
    path.write_text(json.dumps(payload()), encoding="utf-8")
    assert load_round_input_file(path).round_number == 2
