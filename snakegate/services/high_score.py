"""
High score persistence - a single integer in a text file.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class HighScoreStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> int:
        """Stored high score; a missing or unreadable file counts as 0."""
        if not self.path.exists():
            return 0
        text = self.path.read_text(encoding='utf-8').strip()
        try:
            return int(text.split()[0]) if text else 0
        except ValueError:
            logger.warning("Ignoring malformed high score file %s: %r", self.path, text)
            return 0

    def save(self, score: int) -> bool:
        """Write score if it beats the stored one. Returns True when written."""
        if score <= self.load():
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{score}\n", encoding='utf-8')
        logger.info("New high score %d", score)
        return True
