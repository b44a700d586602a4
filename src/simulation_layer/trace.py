"""
Optional observer threaded through a round resolution.

The engine's return value never depends on a trace; pass one in to inspect
why a team got the demand it got (which gate excluded it, which factor
collapsed its pull).
"""

from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from src.simulation_layer.models import CellAllocation, TeamPull


class RoundTrace:
    """Collects per-cell events during allocation."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []
        self.cells: List[CellAllocation] = []

    def skipped(self, segment: str, region: str, team_id: str, reason: str) -> None:
        self.events.append({
            "segment": segment,
            "region": region,
            "team_id": team_id,
            "event": "skipped",
            "reason": reason,
        })

    def pulled(self, segment: str, region: str, pull: TeamPull) -> None:
        self.events.append({
            "segment": segment,
            "region": region,
            "event": "pull",
            **asdict(pull),
        })

    def allocated(self, cell: CellAllocation) -> None:
        self.cells.append(cell)

    def for_team(self, team_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("team_id") == team_id]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.events)
