"""
Domain entities for the SnakeGate game engine.

This module contains the core game entities that are independent of
infrastructure concerns (terminal, files, input devices).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, PAUSE, QUIT,
    CellKind, GameStatus, TerminalReason, TickOutcome,
)
from .grid import Grid
from .snake import Snake
from .items import ItemManager
from .gates import GateManager
from .stage import StageConfig, MissionTracker, DEFAULT_STAGES, load_stages
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'PAUSE', 'QUIT',
    'CellKind', 'GameStatus', 'TerminalReason', 'TickOutcome',
    'Grid',
    'Snake',
    'ItemManager',
    'GateManager',
    'StageConfig', 'MissionTracker', 'DEFAULT_STAGES', 'load_stages',
    'GameState',
]
