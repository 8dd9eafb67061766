"""
Input sources for SnakeGate.

This module contains the player abstraction and the implementations that
feed commands into a game session.
"""

from .base import Player
from .random_player import RandomPlayer
from .keyboard_player import KeyboardPlayer, key_to_command

__all__ = [
    'Player',
    'RandomPlayer',
    'KeyboardPlayer',
    'key_to_command',
]
