"""
Round snapshot handed to the quarter engine, and the reader that assembles it.

`load_round_input` is the boundary where stored records (plain dicts, JSON)
become typed, validated engine input. Domain violations (round < 1, duplicate
segments, a brand targeting a segment the game does not have) are rejected
here so the engine may assume referential validity.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from src.data_layer.decision_schema import Decision, normalize_decision
from src.data_layer.entities import Segment, Team
from src.data_layer.errors import RoundInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundInput:
    """Immutable snapshot of one game round."""

    round_number: int
    teams: List[Team]
    segments: List[Segment]
    decisions: Dict[str, Decision] = field(default_factory=dict)
    # Prior round results by team id; only `ending_cash` is read
    previous_results: Dict[str, Any] = field(default_factory=dict)

    def decision_for(self, team_id: str) -> Decision:
        """A team without a decision plays an all-zero Decision."""
        return self.decisions.get(team_id) or Decision()

    def segment_named(self, name: str) -> Optional[Segment]:
        for segment in self.segments:
            if segment.name == name:
                return segment
        return None


def validate_round_input(round_input: RoundInput) -> None:
    """Raise RoundInputError on referential problems in an assembled snapshot."""
    if round_input.round_number < 1:
        raise RoundInputError(f"Round number must be >= 1, got {round_input.round_number}")

    names = [s.name for s in round_input.segments]
    if len(names) != len(set(names)):
        raise RoundInputError(f"Duplicate segment names: {names}")

    team_ids = [t.id for t in round_input.teams]
    if len(team_ids) != len(set(team_ids)):
        raise RoundInputError(f"Duplicate team ids: {team_ids}")

    known = set(names)
    for team in round_input.teams:
        for brand in team.active_brands:
            if brand.target_segment is not None and brand.target_segment not in known:
                raise RoundInputError(
                    f"Brand {brand.name!r} of team {team.id!r} targets unknown segment "
                    f"{brand.target_segment!r}"
                )

    unknown = set(round_input.decisions) - set(team_ids)
    if unknown:
        raise RoundInputError(f"Decisions for unknown teams: {sorted(unknown)}")


def load_round_input(payload: Dict[str, Any]) -> RoundInput:
    """Assemble a RoundInput from stored records.

    Expected keys: ``round`` (or ``quarter``), ``teams``, ``segments``,
    ``decisions`` (mapping team id -> raw decision), optional
    ``previous_results`` (team id -> mapping with ``ending_cash``).
    """
    raw_round = payload.get("round", payload.get("quarter"))
    try:
        round_number = int(raw_round)
    except (TypeError, ValueError):
        raise RoundInputError(f"Invalid round number: {raw_round!r}")

    try:
        teams = [Team.from_dict(t) for t in payload.get("teams") or []]
        segments = [Segment.from_dict(s) for s in payload.get("segments") or []]
    except KeyError as e:
        raise RoundInputError(f"Missing required field: {e}")

    brands_by_team = {t.id: t.active_brands for t in teams}
    decisions = {}
    for team_id, raw in (payload.get("decisions") or {}).items():
        team_id = str(team_id)
        try:
            decisions[team_id] = normalize_decision(raw, brands_by_team.get(team_id, []))
        except ValidationError as e:
            raise RoundInputError(f"Malformed decision for team {team_id!r}: {e}")

    previous = {
        str(team_id): result
        for team_id, result in (payload.get("previous_results") or {}).items()
    }

    round_input = RoundInput(
        round_number=round_number,
        teams=teams,
        segments=segments,
        decisions=decisions,
        previous_results=previous,
    )
    validate_round_input(round_input)
    logger.debug(
        "Round %d input: %d teams, %d segments, %d decisions",
        round_number, len(teams), len(segments), len(decisions),
    )
    return round_input


def load_round_input_file(path: Union[str, Path]) -> RoundInput:
    """Read a JSON round snapshot from disk."""
    with open(path, encoding="utf-8") as f:
        return load_round_input(json.load(f))
