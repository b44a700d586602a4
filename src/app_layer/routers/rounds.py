"""
Round resolution API endpoints.
"""

from fastapi import APIRouter, Depends

from src.analysis_layer.leaderboard import leaderboard
from src.app_layer.dependencies import get_engine
from src.app_layer.schemas import RoundResolveRequest, RoundResolveResponse, StandingRow
from src.data_layer.entities import DEFAULT_SEGMENT_DATA
from src.data_layer.round_input import load_round_input
from src.simulation_layer.engine import QuarterEngine

router = APIRouter()


@router.post("/resolve", response_model=RoundResolveResponse)
async def resolve_round(
    request: RoundResolveRequest,
    include_cells: bool = False,
    engine: QuarterEngine = Depends(get_engine),
):
    """Resolve one round from a full snapshot of teams, segments and decisions."""
    payload = request.model_dump()
    if request.segments is None:
        payload["segments"] = DEFAULT_SEGMENT_DATA
    output = engine.resolve_round(load_round_input(payload))

    board = leaderboard(output.results.values())
    standings = [
        StandingRow(
            rank=int(row["rank"]),
            team_id=str(row["team_id"]),
            team_name=str(row["team_name"]),
            balanced_scorecard=float(row["balanced_scorecard"]),
            ending_cash=int(row["ending_cash"]),
        )
        for row in board.to_dict(orient="records")
    ]
    data = output.to_dict()
    return RoundResolveResponse(
        round=request.round,
        results=data["results"],
        market_research=data["market_research"],
        standings=standings,
        cells=data["cells"] if include_cells else None,
    )
