"""
Game constants for SnakeGate.
"""

from enum import Enum, IntEnum

# Board size (rows x columns), row 0 is the top edge
HEIGHT = 21
WIDTH = 21

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Non-directional commands
PAUSE = "PAUSE"
QUIT = "QUIT"

# Fixed scan order used when every preferred gate exit is blocked
SCAN_ORDER = (UP, DOWN, LEFT, RIGHT)

# (row delta, col delta)
DELTAS = {
    UP: (-1, 0),
    DOWN: (1, 0),
    LEFT: (0, -1),
    RIGHT: (0, 1),
}

OPPOSITE = {UP: DOWN, DOWN: UP, LEFT: RIGHT, RIGHT: LEFT}
CLOCKWISE = {UP: RIGHT, RIGHT: DOWN, DOWN: LEFT, LEFT: UP}
COUNTER_CLOCKWISE = {UP: LEFT, LEFT: DOWN, DOWN: RIGHT, RIGHT: UP}

# Snake settings
MIN_SNAKE_LENGTH = 3
START_DIRECTION = RIGHT

# Item settings
ITEM_LIFESPAN = 300
MAX_GROWTH_ITEMS = 3
MAX_POISON_ITEMS = 3
GROWTH_SPAWN_INTERVAL = 20
POISON_SPAWN_INTERVAL = 35

# Gate settings
GATE_COOLDOWN_TICKS = 5

# Score deltas
GROWTH_POINTS = 10
POISON_POINTS = -5
GATE_POINTS = 20
LENGTH_POINTS = 100


class CellKind(IntEnum):
    """What occupies a grid cell."""
    EMPTY = 0
    WALL = 1
    POISON = 2
    SNAKE_BODY = 3
    GROWTH = 4
    GATE = 5
    IMMUNE_WALL = 9


# Cells a snake head may move into without dying
PASSABLE_KINDS = frozenset({CellKind.EMPTY, CellKind.GROWTH, CellKind.POISON})
WALL_KINDS = frozenset({CellKind.WALL, CellKind.IMMUNE_WALL})


class TerminalReason(Enum):
    """Why a session ended before all stages were cleared."""
    UTURN = "uturn"
    WALL = "wall"
    SELF = "self"
    TURN_LIMIT = "turn_limit"
    SHORT_LENGTH = "short_length"
    GATE_COOLDOWN = "gate_cooldown"
    QUIT = "quit"

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self]


REASON_MESSAGES = {
    TerminalReason.UTURN: "U-turn attempted.",
    TerminalReason.WALL: "Collided with a wall.",
    TerminalReason.SELF: "Collided with self.",
    TerminalReason.TURN_LIMIT: "Stage turn limit exceeded.",
    TerminalReason.SHORT_LENGTH: "Snake length too short (<3).",
    TerminalReason.GATE_COOLDOWN: "Entered gate during cooldown.",
    TerminalReason.QUIT: "Pressed 'Q' to quit.",
}


class GameStatus(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    WON = "won"


class TickOutcome(Enum):
    """What the orchestrator reports after one frame."""
    CONTINUE = "continue"
    STAGE_ADVANCE = "stage_advance"
    GAME_OVER = "game_over"
    WON = "won"
