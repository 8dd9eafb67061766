"""
Base player interface for the game engine.
"""

from typing import Optional

from ..domain.game_state import GameState


class Player:
    """
    Base class/interface for input sources.

    A player is asked once per frame for the next command given the
    current game state.
    """

    def __init__(self, name: str = "Player"):
        self.name = name

    def get_move(self, game_state: GameState) -> Optional[str]:
        """
        Return the next command given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of "UP", "DOWN", "LEFT", "RIGHT", "PAUSE", "QUIT",
            or None when there is no new input this frame.
        """
        raise NotImplementedError
