"""
Pre-submission checks on a team's decision against its cash position.

Warnings are advisory and never block a submission. Errors block a final
submit but a draft may still be saved; the engine itself accepts any
well-formed decision.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import EngineSettings
from src.data_layer.decision_schema import Decision
from src.data_layer.entities import Team
from src.simulation_layer.financials import operating_spend

AD_CASH_WARNING_RATIO = 0.5
DIVIDEND_CASH_WARNING_RATIO = 0.3
SPEND_CASH_ERROR_RATIO = 1.2


@dataclass(frozen=True)
class DecisionIssue:
    field: str
    message: str
    severity: str  # "warning" | "error"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "severity": self.severity}


@dataclass(frozen=True)
class DecisionCheck:
    issues: List[DecisionIssue] = field(default_factory=list)

    @property
    def warnings(self) -> List[DecisionIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def errors(self) -> List[DecisionIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_decisions(
    decision: Decision,
    team: Team,
    settings: Optional[EngineSettings] = None,
) -> DecisionCheck:
    """Flag risky spending relative to the team's current cash balance."""
    settings = settings or EngineSettings()
    cash = team.cash_balance
    spend = operating_spend(decision, settings)
    issues = []

    if spend["advertising_expense"] > max(0.0, cash * AD_CASH_WARNING_RATIO):
        issues.append(DecisionIssue("advertising", "Ad spending exceeds 50% of cash", "warning"))
    if decision.dividend > max(0.0, cash * DIVIDEND_CASH_WARNING_RATIO):
        issues.append(DecisionIssue("dividend", "Dividend exceeds 30% of cash", "warning"))

    planned = sum(spend.values()) + decision.dividend
    if planned > max(0.0, cash * SPEND_CASH_ERROR_RATIO):
        issues.append(DecisionIssue("total", "Planned spending significantly exceeds cash", "error"))

    return DecisionCheck(issues=issues)
