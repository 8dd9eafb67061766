"""
Score persistence services.
"""

from .ranking import RankingStore, RankingEntry, MAX_ENTRIES, DISPLAY_ENTRIES
from .high_score import HighScoreStore
from .results import SessionResult, record_session

__all__ = [
    'RankingStore',
    'RankingEntry',
    'MAX_ENTRIES',
    'DISPLAY_ENTRIES',
    'HighScoreStore',
    'SessionResult',
    'record_session',
]
