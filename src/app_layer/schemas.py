"""
Pydantic models for API request/response.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RoundResolveRequest(BaseModel):
    round: int = Field(ge=1)
    teams: List[Dict[str, Any]]
    segments: Optional[List[Dict[str, Any]]] = None  # default segments when omitted
    decisions: Dict[str, Any] = Field(default_factory=dict)
    previous_results: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class StandingRow(BaseModel):
    rank: int
    team_id: str
    team_name: str
    balanced_scorecard: float
    ending_cash: int


class RoundResolveResponse(BaseModel):
    round: int
    results: Dict[str, Any]
    market_research: Dict[str, Any]
    standings: List[StandingRow]
    cells: Optional[List[Dict[str, Any]]] = None


class DecisionValidateRequest(BaseModel):
    team: Dict[str, Any]
    decision: Dict[str, Any] = Field(default_factory=dict)


class DecisionIssueResponse(BaseModel):
    field: str
    message: str
    severity: str


class DecisionValidateResponse(BaseModel):
    ok: bool
    warnings: List[DecisionIssueResponse]
    errors: List[DecisionIssueResponse]
    decision: Dict[str, Any]
    planned_spend: Dict[str, int]
