"""
Gate pair management and teleport geometry.
"""

import logging
import random
from typing import List, Optional, Tuple

from .constants import (
    CLOCKWISE,
    COUNTER_CLOCKWISE,
    DELTAS,
    DOWN,
    LEFT,
    OPPOSITE,
    PASSABLE_KINDS,
    RIGHT,
    SCAN_ORDER,
    UP,
    CellKind,
)
from .grid import Grid, Position

logger = logging.getLogger(__name__)


class GateManager:
    """
    Owns the (at most one) active gate pair.

    Gates are carved out of ordinary Wall cells that touch at least one
    Empty cell. The pair is always created and removed together; when its
    lifespan elapses it is regenerated somewhere else.
    """

    def __init__(self, grid: Grid, lifespan: int, rng: Optional[random.Random] = None):
        self.grid = grid
        self.lifespan = lifespan
        self.elapsed = 0
        self.rng = rng or random.Random()
        self.pair: Optional[Tuple[Position, Position]] = None

    @property
    def ticks_left(self) -> Optional[int]:
        if self.pair is None:
            return None
        return max(0, self.lifespan - self.elapsed)

    def candidates(self) -> List[Position]:
        """Wall cells (never corners) with an orthogonally adjacent Empty cell."""
        result = []
        for pos in self.grid.cells_of(CellKind.WALL):
            if any(self.grid.cell_at(n) == CellKind.EMPTY for n in self.grid.neighbors(pos)):
                result.append(pos)
        return result

    def reset(self, lifespan: int) -> None:
        """Forget the pair without touching the grid (used after a new layout)."""
        self.pair = None
        self.elapsed = 0
        self.lifespan = lifespan

    def clear(self) -> None:
        if self.pair is not None:
            for pos in self.pair:
                self.grid.set_cell(pos, CellKind.WALL)
        self.pair = None

    def set_pair(self, first: Position, second: Position) -> None:
        self.clear()
        self.grid.set_cell(first, CellKind.GATE)
        self.grid.set_cell(second, CellKind.GATE)
        self.pair = (first, second)
        self.elapsed = 0

    def spawn_pair(self) -> Optional[Tuple[Position, Position]]:
        """
        Replace the current pair with a freshly chosen one.

        Returns:
            The new pair, or None when fewer than two candidate walls exist
            (no gates this cycle; a later regeneration may succeed).
        """
        self.clear()
        walls = self.candidates()
        if len(walls) < 2:
            logger.debug("Only %d gate candidate(s); no gates this cycle", len(walls))
            return None
        self.rng.shuffle(walls)
        self.set_pair(walls[0], walls[1])
        logger.debug("Spawned gate pair at %s and %s", walls[0], walls[1])
        return self.pair

    def tick_lifespan(self) -> bool:
        """Advance the lifespan; returns True when the pair was regenerated."""
        self.elapsed += 1
        if self.elapsed < self.lifespan:
            return False
        self.spawn_pair()
        return True

    def _passable(self, pos: Position) -> bool:
        return self.grid.in_bounds(pos) and self.grid.cell_at(pos) in PASSABLE_KINDS

    def _step(self, pos: Position, direction: str) -> Position:
        d_row, d_col = DELTAS[direction]
        return (pos[0] + d_row, pos[1] + d_col)

    def compute_exit_direction(self, exit_cell: Position, entry_direction: str) -> str:
        """
        Direction the snake leaves exit_cell in.

        Border gates always point into the board. Interior gates keep the
        entry direction if they can, then try clockwise, counter-clockwise
        and reversed, then any open side in UP/DOWN/LEFT/RIGHT order. If all
        sides are closed the entry direction is returned and the caller sees
        the collision.
        """
        row, col = exit_cell
        if not self.grid.is_corner(exit_cell):
            if row == 0:
                return DOWN
            if row == self.grid.height - 1:
                return UP
            if col == 0:
                return RIGHT
            if col == self.grid.width - 1:
                return LEFT

        preferred = (
            entry_direction,
            CLOCKWISE[entry_direction],
            COUNTER_CLOCKWISE[entry_direction],
            OPPOSITE[entry_direction],
        )
        for direction in preferred:
            if self._passable(self._step(exit_cell, direction)):
                return direction

        for direction in SCAN_ORDER:
            if self._passable(self._step(exit_cell, direction)):
                return direction

        return entry_direction

    def other_gate(self, gate: Position) -> Position:
        if self.pair is None or gate not in self.pair:
            raise ValueError(f"{gate} is not an active gate.")
        first, second = self.pair
        return second if gate == first else first

    def teleport(self, head_pos: Position, entry_direction: str) -> Tuple[Position, str]:
        """
        Resolve entering the gate at head_pos.

        Returns:
            (new head position one step beyond the exit gate, new direction)
        """
        exit_cell = self.other_gate(head_pos)
        direction = self.compute_exit_direction(exit_cell, entry_direction)
        return self._step(exit_cell, direction), direction
