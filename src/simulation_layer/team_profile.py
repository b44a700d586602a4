"""Per-team context computed once per round and shared by every stage."""

from dataclasses import dataclass
from typing import List

from src.data_layer.decision_schema import Decision
from src.data_layer.entities import Team
from src.simulation_layer.brand_scorer import BrandScore, score_brands


@dataclass(frozen=True)
class TeamProfile:
    team: Team
    decision: Decision
    brand_scores: List[BrandScore]

    @property
    def team_id(self) -> str:
        return self.team.id

    @property
    def targeted_segments(self) -> List[str]:
        """Distinct target segments of the team's brands, in brand order."""
        seen = []
        for bs in self.brand_scores:
            if bs.target_segment and bs.target_segment not in seen:
                seen.append(bs.target_segment)
        return seen

    @classmethod
    def build(cls, team: Team, decision: Decision) -> "TeamProfile":
        return cls(team=team, decision=decision, brand_scores=score_brands(team.active_brands))
