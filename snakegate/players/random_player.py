"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from ..domain.constants import DELTAS, OPPOSITE, VALID_MOVES, CellKind
from ..domain.game_state import GameState
from .base import Player

SAFE_KINDS = {CellKind.EMPTY, CellKind.GROWTH, CellKind.POISON}


class RandomPlayer(Player):
    """
    An autopilot that picks a direction avoiding walls, its own body and
    U-turns. Gates are only considered once the cooldown has expired.
    """

    def __init__(self, name: str = "RandomPlayer", rng: Optional[random.Random] = None):
        super().__init__(name)
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameState) -> Optional[str]:
        head_row, head_col = game_state.snake_positions[0]
        current = game_state.direction

        # Calculate all possible next positions, skipping the U-turn
        valid_moves: List[str] = []
        for move in sorted(VALID_MOVES):
            if move == OPPOSITE[current]:
                continue
            d_row, d_col = DELTAS[move]
            new_row, new_col = head_row + d_row, head_col + d_col

            # Check board edges
            if not (0 <= new_row < game_state.height and 0 <= new_col < game_state.width):
                continue

            kind = game_state.cells[new_row][new_col]
            if kind in SAFE_KINDS:
                valid_moves.append(move)
            elif kind == CellKind.GATE and game_state.gate_cooldown == 0:
                valid_moves.append(move)

        # If no valid moves, keep going (we'll die anyway)
        if not valid_moves:
            return None

        move = self.rng.choice(valid_moves)
        return None if move == current else move
