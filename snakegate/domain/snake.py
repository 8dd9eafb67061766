"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Tuple, Optional

from .constants import (
    CellKind,
    DELTAS,
    MIN_SNAKE_LENGTH,
    OPPOSITE,
    START_DIRECTION,
    TerminalReason,
)
from .grid import Grid, Position


class Snake:
    """
    Represents the player's snake on the board.

    The snake owns its segment order; the grid's SnakeBody markers are a
    derived index. Every method that changes positions takes the grid and
    updates both together, so the two never drift apart.

    Attributes:
        positions: deque of (row, col) from head at index 0 to tail at the end
        direction: one of UP, DOWN, LEFT, RIGHT
        gate_cooldown: ticks left before another gate may be entered
        alive: whether this snake is still alive
        death_reason: TerminalReason once the snake has died
        death_round: the tick number when the snake died
    """

    def __init__(self, positions: List[Tuple[int, int]], direction: str = START_DIRECTION):
        self.positions = deque(positions)
        self.direction = direction
        self.gate_cooldown = 0
        self.alive = True
        self.death_reason: Optional[TerminalReason] = None
        self.death_round: Optional[int] = None

    @classmethod
    def centered(cls, grid: Grid) -> "Snake":
        """A length-3 snake at the grid centre, body trailing to the left."""
        row, col = grid.height // 2, grid.width // 2
        return cls([(row, col), (row, col - 1), (row, col - 2)], START_DIRECTION)

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        return self.positions[-1]

    def __len__(self):
        return len(self.positions)

    def next_head(self) -> Position:
        d_row, d_col = DELTAS[self.direction]
        row, col = self.head
        return (row + d_row, col + d_col)

    def is_reversal(self, direction: str) -> bool:
        return direction == OPPOSITE[self.direction]

    def place(self, grid: Grid) -> None:
        """Mark every segment on a freshly laid-out grid."""
        if len(self.positions) < MIN_SNAKE_LENGTH:
            raise ValueError(
                f"Snake must start with at least {MIN_SNAKE_LENGTH} segments, got {len(self.positions)}."
            )
        for pos in self.positions:
            grid.set_cell(pos, CellKind.SNAKE_BODY)

    def advance(self, grid: Grid, new_head: Position) -> None:
        self.positions.appendleft(new_head)
        grid.set_cell(new_head, CellKind.SNAKE_BODY)

    def drop_tail(self, grid: Grid) -> Position:
        tail = self.positions.pop()
        grid.set_cell(tail, CellKind.EMPTY)
        return tail

    def kill(self, reason: TerminalReason, tick: int) -> None:
        self.alive = False
        self.death_reason = reason
        self.death_round = tick

    def __repr__(self):
        return f"<Snake len={len(self)} head={self.head} dir={self.direction} alive={self.alive}>"
