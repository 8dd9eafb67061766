"""
Keyboard player - reads commands from a curses window.
"""

import curses
from typing import Optional

from ..domain.constants import UP, DOWN, LEFT, RIGHT, PAUSE, QUIT
from ..domain.game_state import GameState
from .base import Player

KEY_COMMANDS = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    ord('w'): UP,
    ord('s'): DOWN,
    ord('a'): LEFT,
    ord('d'): RIGHT,
    ord('p'): PAUSE,
    ord('P'): PAUSE,
    ord('q'): QUIT,
    ord('Q'): QUIT,
}


def key_to_command(key: int) -> Optional[str]:
    return KEY_COMMANDS.get(key)


class KeyboardPlayer(Player):
    """
    Polls a curses window for the next key.

    The window's timeout decides whether this blocks: the front end sets
    it to the stage tick delay while playing and to blocking while paused.
    """

    def __init__(self, window, name: str = "Player"):
        super().__init__(name)
        self.window = window

    def get_move(self, game_state: GameState) -> Optional[str]:
        key = self.window.getch()
        if key == -1:
            return None
        return key_to_command(key)
