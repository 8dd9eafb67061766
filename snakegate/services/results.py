"""
End-of-session bookkeeping: final score, high score and ranking.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .high_score import HighScoreStore
from .ranking import RankingStore

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    player_name: str
    final_score: int
    rank: int
    ranking_size: int
    won: bool
    stage_reached: int
    reason: Optional[str]
    new_high_score: bool


def record_session(game, player_name: str, ranking: RankingStore,
                   high_scores: Optional[HighScoreStore] = None) -> SessionResult:
    """Persist a finished game and report where it landed."""
    final_score = game.final_score()
    new_high = high_scores.save(final_score) if high_scores is not None else False
    entries = ranking.record_result(player_name, final_score)
    rank = ranking.rank_of(player_name.strip() or "Player")

    result = SessionResult(
        player_name=player_name,
        final_score=final_score,
        rank=rank,
        ranking_size=len(entries),
        won=game.won,
        stage_reached=game.stage_index,
        reason=None if game.reason is None else game.reason.message,
        new_high_score=new_high,
    )
    logger.info("Session %s finished: %s", game.game_id, result)
    return result
