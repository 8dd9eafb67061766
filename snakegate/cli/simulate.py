#!/usr/bin/env python3
"""Run unattended SnakeGate sessions with the random autopilot.

Useful for checking stage tables: every game is seeded, so a reported game
can be replayed exactly with the same --seed.
"""

import argparse
import logging
import random
from typing import Dict, List

from ..config import load_settings
from ..domain.stage import load_stages
from ..game import SnakeGame, run_session
from ..players.random_player import RandomPlayer
from ..services.ranking import RankingStore
from ..services.results import record_session

logger = logging.getLogger(__name__)

DEFAULT_MAX_FRAMES = 5000


def simulate_game(seed: int, stages, max_frames: int = DEFAULT_MAX_FRAMES,
                  verbose: bool = False) -> SnakeGame:
    """Play one seeded game to completion and return the finished session."""
    rng = random.Random(seed)
    game = SnakeGame(stages=stages, rng=rng, game_id=f"sim-{seed}")
    player = RandomPlayer(name=f"auto-{seed}", rng=random.Random(seed))
    render = (lambda state: logger.debug("\n%s", state.print_board())) if verbose else None
    run_session(game, player, render=render, max_frames=max_frames)
    return game


def summarize(games: List[SnakeGame]) -> Dict[str, float]:
    scores = [g.final_score() for g in games]
    return {
        "games": len(games),
        "wins": sum(1 for g in games if g.won),
        "avg_score": sum(scores) / len(scores) if scores else 0.0,
        "best_score": max(scores) if scores else 0,
        "avg_ticks": sum(g.tick for g in games) / len(games) if games else 0.0,
    }


def main(argv=None):
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Run SnakeGate games with the random autopilot."
    )
    parser.add_argument("--games", type=int, default=10,
                        help="Number of games to run (default: 10)")
    parser.add_argument("--seed", type=int, default=settings.seed if settings.seed is not None else 0,
                        help="Seed of the first game; game i uses seed + i (default: 0)")
    parser.add_argument("--stages-file", type=str, default=settings.stages_file,
                        help="YAML file overriding the stage table")
    parser.add_argument("--max-frames", type=int, default=DEFAULT_MAX_FRAMES,
                        help=f"Frame cap per game (default: {DEFAULT_MAX_FRAMES})")
    parser.add_argument("--record", action="store_true",
                        help="Append each result to the ranking file")
    parser.add_argument("--verbose", action="store_true",
                        help="Log the board every frame")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(message)s",
    )

    stages = load_stages(args.stages_file) if args.stages_file else settings.stages()
    ranking = RankingStore(settings.ranking_file) if args.record else None

    games: List[SnakeGame] = []
    for i in range(max(0, args.games)):
        seed = args.seed + i
        game = simulate_game(seed, stages, max_frames=args.max_frames, verbose=args.verbose)
        games.append(game)
        outcome = "WON" if game.won else (game.reason.message if game.reason else "frame cap")
        print(f"seed={seed} stage={game.stage_index + 1}/{len(stages)} ticks={game.tick} "
              f"length={len(game.snake)} score={game.final_score()} -> {outcome}")
        if ranking is not None and game.game_over:
            record_session(game, f"auto-{seed}", ranking)

    stats = summarize(games)
    print(
        f"\n{stats['games']} game(s): {stats['wins']} won, "
        f"avg score {stats['avg_score']:.1f}, best {stats['best_score']}, "
        f"avg ticks {stats['avg_ticks']:.1f}"
    )


if __name__ == "__main__":
    main()
