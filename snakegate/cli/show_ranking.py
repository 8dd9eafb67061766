#!/usr/bin/env python3
"""Print the SnakeGate ranking table without starting the game."""

import argparse
import logging

from ..config import load_settings
from ..services.ranking import DISPLAY_ENTRIES, RankingStore
from .curses_view import format_ranking

logger = logging.getLogger(__name__)


def main(argv=None):
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Show the SnakeGate top ranking.")
    parser.add_argument(
        "--ranking-file",
        type=str,
        default=settings.ranking_file,
        help="Ranking file to read (default: SNAKEGATE_RANKING_FILE or ranking.txt)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=DISPLAY_ENTRIES,
        help=f"How many entries to show (default: {DISPLAY_ENTRIES})",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    store = RankingStore(args.ranking_file)
    entries = store.top(max(1, args.top))
    if not entries:
        logger.info("No ranking yet (%s)", store.path)
        return

    logger.info("TOP RANKING (%s)", store.path)
    for line in format_ranking(entries, limit=len(entries)):
        logger.info(line)


if __name__ == "__main__":
    main()
