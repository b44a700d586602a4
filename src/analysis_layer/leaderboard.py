"""
Leaderboard - round history to standings.

The engine scores each round in isolation; the cumulative scorecard shown
to players is the trailing-window mean of each team's balanced scorecard,
computed here from the result history.
"""

from typing import Iterable, Optional

import pandas as pd

from src.simulation_layer.models import RoundResult

LEADERBOARD_COLUMNS = [
    "rank",
    "team_id",
    "team_name",
    "round_number",
    "balanced_scorecard",
    "cumulative_scorecard",
    "ending_cash",
    "total_net_income",
    "revenue",
    "units_sold",
]


def results_frame(results: Iterable[RoundResult]) -> pd.DataFrame:
    """One flat row per (team, round)."""
    df = pd.DataFrame([r.to_record() for r in results])
    if df.empty:
        return df
    return df.sort_values(["team_id", "round_number"]).reset_index(drop=True)


def with_cumulative_scores(df: pd.DataFrame, window: int = 4) -> pd.DataFrame:
    """Add the trailing-window scorecard mean and running net income per team."""
    df = df.sort_values(["team_id", "round_number"]).copy()
    by_team = df.groupby("team_id", sort=False)
    df["cumulative_scorecard"] = by_team["balanced_scorecard"].transform(
        lambda s: s.rolling(window, min_periods=1).mean()
    )
    df["total_net_income"] = by_team["net_income"].cumsum()
    return df


def leaderboard(
    results: Iterable[RoundResult],
    window: int = 4,
    as_of_round: Optional[int] = None,
) -> pd.DataFrame:
    """
    Standings after `as_of_round` (default: the latest round played).

    Ranked by cumulative scorecard, then ending cash; team id breaks exact ties.
    """
    df = results_frame(results)
    if df.empty:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)
    if as_of_round is not None:
        df = df[df["round_number"] <= as_of_round]
        if df.empty:
            return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    df = with_cumulative_scores(df, window)
    latest = df.groupby("team_id", sort=False).tail(1)
    latest = latest.sort_values(
        ["cumulative_scorecard", "ending_cash", "team_id"],
        ascending=[False, False, True],
    ).reset_index(drop=True)
    latest["rank"] = range(1, len(latest) + 1)
    latest["cumulative_scorecard"] = latest["cumulative_scorecard"].round(3)
    return latest[LEADERBOARD_COLUMNS]


def format_leaderboard(board: pd.DataFrame) -> str:
    """Plain-text table for terminals and logs."""
    if board.empty:
        return "(no results yet)"
    view = board[["rank", "team_name", "cumulative_scorecard", "balanced_scorecard", "ending_cash"]]
    return view.to_string(index=False)
