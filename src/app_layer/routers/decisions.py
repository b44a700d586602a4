"""
Decision check API endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from config import Settings
from src.app_layer.dependencies import get_cached_settings
from src.app_layer.schemas import DecisionIssueResponse, DecisionValidateRequest, DecisionValidateResponse
from src.data_layer.decision_checks import validate_decisions
from src.data_layer.decision_schema import normalize_decision
from src.data_layer.entities import Team
from src.data_layer.errors import RoundInputError
from src.simulation_layer.financials import operating_spend

router = APIRouter()


@router.post("/validate", response_model=DecisionValidateResponse)
async def validate_decision(
    request: DecisionValidateRequest,
    settings: Settings = Depends(get_cached_settings),
):
    """Normalize a draft decision and check it against the team's cash."""
    try:
        team = Team.from_dict(request.team)
        decision = normalize_decision(request.decision, team.active_brands)
    except KeyError as e:
        raise RoundInputError(f"Missing required field: {e}")
    except ValidationError as e:
        raise RoundInputError(f"Malformed decision: {e}")

    check = validate_decisions(decision, team, settings.engine)
    return DecisionValidateResponse(
        ok=check.ok,
        warnings=[DecisionIssueResponse(**i.to_dict()) for i in check.warnings],
        errors=[DecisionIssueResponse(**i.to_dict()) for i in check.errors],
        decision=decision.model_dump(),
        planned_spend=operating_spend(decision, settings.engine),
    )
