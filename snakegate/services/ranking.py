"""
Ranking persistence - plain "<name> <score>" lines in a text file.

Names may contain spaces, so each line is split at its last space.
Lines that cannot be parsed are skipped rather than failing the read.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

MAX_ENTRIES = 100
DISPLAY_ENTRIES = 20


@dataclass
class RankingEntry:
    name: str
    score: int


def parse_line(line: str) -> Optional[RankingEntry]:
    line = line.strip()
    if not line:
        return None
    name, sep, score = line.rpartition(' ')
    if not sep or not name:
        return None
    try:
        return RankingEntry(name=name, score=int(score))
    except ValueError:
        return None


class RankingStore:
    """Reads and updates the ranking file at path."""

    def __init__(self, path: Union[str, Path], max_entries: int = MAX_ENTRIES):
        self.path = Path(path)
        self.max_entries = max_entries

    def load(self) -> List[RankingEntry]:
        """All parseable entries, highest score first. Missing file -> []."""
        if not self.path.exists():
            return []

        entries: List[RankingEntry] = []
        with self.path.open('r', encoding='utf-8') as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                entry = parse_line(line)
                if entry is None:
                    logger.warning("Skipping malformed ranking line %d in %s: %r",
                                   lineno, self.path, line.rstrip('\n'))
                    continue
                entries.append(entry)

        # sorted() is stable, so equal scores keep file order
        return sorted(entries, key=lambda e: e.score, reverse=True)

    def top(self, limit: int = DISPLAY_ENTRIES) -> List[RankingEntry]:
        return self.load()[:limit]

    def record_result(self, player_name: str, final_score: int) -> List[RankingEntry]:
        """
        Append a result, then rewrite the file sorted and trimmed.

        Returns:
            The ranking as written back to disk.
        """
        name = player_name.strip() or "Player"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('a', encoding='utf-8') as f:
            f.write(f"{name} {int(final_score)}\n")

        entries = self.load()[:self.max_entries]
        with self.path.open('w', encoding='utf-8') as f:
            for entry in entries:
                f.write(f"{entry.name} {entry.score}\n")

        logger.info("Recorded %s with %d points (%d entries kept)", name, final_score, len(entries))
        return entries

    def rank_of(self, player_name: str) -> int:
        """1-based position of the player's best entry, 0 if absent."""
        for index, entry in enumerate(self.load(), start=1):
            if entry.name == player_name:
                return index
        return 0
