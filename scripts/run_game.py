"""
CLI entry point for playing a full solo game against automated competitors.

    python scripts/run_game.py --scenario global-domination --competitors 3 --seed 7
    python scripts/run_game.py --decision my_decision.json --output results.csv

Without --decision the player's team is played by the balanced strategist too.
"""

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is in sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings, setup_logging
from src.analysis_layer.leaderboard import format_leaderboard, leaderboard, results_frame
from src.data_layer.brand_registry import BrandRegistry
from src.data_layer.entities import Team
from src.data_layer.ledger import GameLedger
from src.simulation_layer.engine import QuarterEngine
from src.simulation_layer.persona.competitor_persona import CompetitorStrategist, personality_for
from src.simulation_layer.scenario.game_scenarios import SCENARIOS, get_scenario

PLAYER_ID = "player"
# Index of the balanced personality
PLAYER_PERSONALITY_INDEX = 2


def build_teams(registry, strategist, scenario, competitors, game_settings):
    player = Team(
        id=PLAYER_ID,
        name="Player",
        cash_balance=game_settings.initial_cash,
        total_investment=game_settings.initial_investment,
    )
    registry.create(player, name="Trailblazer", target_segment=scenario.segments[0])
    teams = [player]

    for index in range(competitors):
        team = Team(
            id=f"ai-{index + 1}",
            name=f"{personality_for(index).name.title()} Cycles",
            cash_balance=game_settings.initial_cash,
            total_investment=game_settings.initial_investment,
            is_automated=True,
        )
        strategist.generate_brands(registry, team, scenario, team_index=index)
        teams.append(team)
    return teams


def main():
    parser = argparse.ArgumentParser(description="Quarter Simulation - solo game")
    parser.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        default="local-launch",
        help="Regions and segments the game opens with (default: local-launch)",
    )
    parser.add_argument(
        "--competitors",
        type=int,
        default=3,
        help="Number of automated competitor teams (default: 3)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Rounds to play (default: GAME_MAX_ROUNDS)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for automated competitor decisions",
    )
    parser.add_argument(
        "--decision",
        type=Path,
        default=None,
        help="JSON decision the player submits every round (pricing by brand name is accepted)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the per-round results history to this CSV",
    )
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log)
    scenario = get_scenario(args.scenario)
    segments = scenario.game_segments()
    engine = QuarterEngine(settings.engine.model_copy(update={"regions": scenario.regions}))
    game_settings = settings.game
    if args.rounds is not None:
        game_settings = game_settings.model_copy(update={"max_rounds": args.rounds})

    player_decision = None
    if args.decision is not None:
        with open(args.decision, encoding="utf-8") as f:
            player_decision = json.load(f)

    print("=" * 60)
    print(f"Scenario: {scenario.name} ({', '.join(scenario.regions)})")
    print(f"Segments: {', '.join(s.name for s in segments)}")
    print(f"Competitors: {args.competitors}, rounds: {game_settings.max_rounds}")
    print("=" * 60)

    registry = BrandRegistry(segments, settings=game_settings)
    strategist = CompetitorStrategist(seed=args.seed)
    teams = build_teams(registry, strategist, scenario, args.competitors, game_settings)
    ledger = GameLedger(teams, segments, settings=game_settings)

    while not ledger.is_finished:
        round_number = ledger.current_round
        for index, team in enumerate(teams):
            if team.id == PLAYER_ID and player_decision is not None:
                ledger.submit(team.id, player_decision)
                continue
            team_index = PLAYER_PERSONALITY_INDEX if team.id == PLAYER_ID else index - 1
            decision = strategist.generate_decision(
                team, round_number, scenario, segments, team_index=team_index
            )
            ledger.submit(team.id, decision)

        output = ledger.advance(engine)
        player = output.results[PLAYER_ID]
        print(
            f"Round {round_number}: units {player.financials.units_sold}, "
            f"revenue {player.financials.revenue:,}, net {player.net_income:,}, "
            f"cash {player.ending_cash:,}, score {player.balanced_scorecard:.1f}"
        )

    board = leaderboard(ledger.history, window=game_settings.scorecard_window)
    print()
    print("Final standings")
    print(format_leaderboard(board))

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        results_frame(ledger.history).to_csv(args.output, index=False, encoding="utf-8-sig")
        print(f"\nResults -> {args.output}")


if __name__ == "__main__":
    main()
