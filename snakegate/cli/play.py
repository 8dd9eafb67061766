#!/usr/bin/env python3
"""Play SnakeGate in the terminal.

Menu -> name prompt -> staged game -> game-over / victory screen, with the
result appended to the ranking file. Logs go to a file because the screen
owns the terminal.
"""

import argparse
import curses
import logging
import random
from typing import Optional, Tuple

from ..config import Settings, load_settings
from ..domain.stage import StageConfig
from ..game import SnakeGame, run_session
from ..players.keyboard_player import KeyboardPlayer
from ..services.high_score import HighScoreStore
from ..services.ranking import RankingStore
from ..services.results import record_session
from . import curses_view as view

logger = logging.getLogger(__name__)

STAGE_BANNER_MS = 1500


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play SnakeGate in the terminal.")
    parser.add_argument("--name", type=str, default=None,
                        help="Player name (prompted for when omitted)")
    parser.add_argument("--seed", type=int, default=None,
                        help="RNG seed for a reproducible map (default: SNAKEGATE_SEED or random)")
    parser.add_argument("--stages-file", type=str, default=None,
                        help="YAML file overriding the stage table")
    parser.add_argument("--ranking-file", type=str, default=None,
                        help="Ranking file (default: SNAKEGATE_RANKING_FILE or ranking.txt)")
    parser.add_argument("--highscore-file", type=str, default=None,
                        help="High score file (default: SNAKEGATE_HIGHSCORE_FILE or highscore.txt)")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.seed is not None:
        settings.seed = args.seed
    if args.stages_file:
        settings.stages_file = args.stages_file
    if args.ranking_file:
        settings.ranking_file = args.ranking_file
    if args.highscore_file:
        settings.high_score_file = args.highscore_file
    return settings


def play_game(stdscr, game: SnakeGame, player_name: str,
              ranking: RankingStore, high_scores: HighScoreStore) -> None:
    player = KeyboardPlayer(stdscr, name=player_name)
    high_score = high_scores.load()

    def render(state):
        view.draw_game(stdscr, state, max(high_score, state.total_score))

    def stage_banner(cleared_stage: int):
        view.show_stage_clear(stdscr, cleared_stage)
        curses.napms(STAGE_BANNER_MS)
        curses.flushinp()

    game.new_game()
    stdscr.timeout(game.tick_delay_ms)
    run_session(game, player, render=render, on_stage_advance=stage_banner,
                set_delay=stdscr.timeout)

    result = record_session(game, player_name, ranking, high_scores)
    if result.won:
        view.show_victory(stdscr, player_name, result.final_score)
    else:
        view.show_game_over(stdscr, game.get_current_state(), player_name, result.final_score,
                            result.rank, result.ranking_size, result.reason)


def run_app(stdscr, settings: Settings, stages: Tuple[StageConfig, ...],
            player_name: Optional[str]) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    view.init_colors()

    rng = random.Random(settings.seed)
    game = SnakeGame(stages=stages, rng=rng)
    ranking = RankingStore(settings.ranking_file)
    high_scores = HighScoreStore(settings.high_score_file)

    if not view.wait_for_size(stdscr, game.grid.height, game.grid.width):
        return

    while True:
        choice = view.show_menu(stdscr)
        if choice == view.MENU_RULES:
            if view.show_rules(stdscr, len(stages), stages[0].gate_lifespan) != 1:
                continue
            choice = view.MENU_START
        if choice == view.MENU_RANKING:
            view.show_ranking(stdscr, ranking.top())
            continue
        if choice == view.MENU_EXIT:
            return

        if not player_name:
            player_name = view.prompt_name(stdscr)
        play_game(stdscr, game, player_name, ranking, high_scores)


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = apply_overrides(load_settings(), args)

    logging.basicConfig(
        filename=settings.log_file,
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Load stages before curses takes the terminal so errors print cleanly
    try:
        stages = settings.stages()
    except (OSError, ValueError) as exc:
        logger.error("Could not load stages: %s", exc)
        raise SystemExit(f"Could not load stages: {exc}")

    try:
        curses.wrapper(run_app, settings, stages, args.name)
    except OSError as exc:
        logger.error("I/O error: %s", exc)
        raise SystemExit(f"SnakeGate I/O error: {exc}")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
