"""
Grid entity - the fixed-size cell matrix the game is played on.
"""

import random
from typing import Iterator, List, Optional, Tuple

from .constants import HEIGHT, WIDTH, DELTAS, CellKind

Position = Tuple[int, int]


class Grid:
    """
    A HEIGHT x WIDTH matrix of CellKind values.

    Positions are (row, col) with row 0 at the top. There is no wraparound:
    a position outside the matrix is reported by in_bounds(), never mapped
    back onto the board. The four corners are ImmuneWall for the lifetime of
    the grid and cannot be reassigned.
    """

    def __init__(self, height: int = HEIGHT, width: int = WIDTH):
        if height < 3 or width < 3:
            raise ValueError(f"Grid must be at least 3x3, got {height}x{width}.")
        self.height = height
        self.width = width
        self.cells: List[List[CellKind]] = []
        self.reset_border()

    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.height and 0 <= col < self.width

    def is_corner(self, pos: Position) -> bool:
        row, col = pos
        return row in (0, self.height - 1) and col in (0, self.width - 1)

    def is_border(self, pos: Position) -> bool:
        row, col = pos
        return row in (0, self.height - 1) or col in (0, self.width - 1)

    def cell_at(self, pos: Position) -> CellKind:
        row, col = pos
        return self.cells[row][col]

    def set_cell(self, pos: Position, kind: CellKind) -> None:
        if self.is_corner(pos):
            raise ValueError(f"Corner cell {pos} is an immune wall and cannot be changed.")
        if kind == CellKind.IMMUNE_WALL:
            raise ValueError(f"Immune walls only exist at the corners, not at {pos}.")
        row, col = pos
        self.cells[row][col] = kind

    def neighbors(self, pos: Position) -> Iterator[Position]:
        """Yield the in-bounds orthogonal neighbours of pos."""
        row, col = pos
        for d_row, d_col in DELTAS.values():
            candidate = (row + d_row, col + d_col)
            if self.in_bounds(candidate):
                yield candidate

    def cells_of(self, kind: CellKind) -> List[Position]:
        """Return every position currently holding kind, in row-major order."""
        return [
            (row, col)
            for row in range(self.height)
            for col in range(self.width)
            if self.cells[row][col] == kind
        ]

    def count(self, kind: CellKind) -> int:
        return sum(row.count(kind) for row in self.cells)

    def replace_all(self, old: CellKind, new: CellKind) -> int:
        """Turn every old cell into new; returns how many changed."""
        changed = 0
        for row in self.cells:
            for col, kind in enumerate(row):
                if kind == old:
                    row[col] = new
                    changed += 1
        return changed

    def reset_border(self) -> None:
        """Empty interior, Wall edges, ImmuneWall corners."""
        self.cells = []
        for row in range(self.height):
            line = []
            for col in range(self.width):
                if self.is_corner((row, col)):
                    line.append(CellKind.IMMUNE_WALL)
                elif self.is_border((row, col)):
                    line.append(CellKind.WALL)
                else:
                    line.append(CellKind.EMPTY)
            self.cells.append(line)

    def build_layout(self, wall_probability: float, rng: Optional[random.Random] = None) -> None:
        """
        Lay out a fresh stage map.

        Args:
            wall_probability: percentage chance (0-100) that an interior cell
                becomes an inner Wall.
            rng: random source; defaults to the module-level generator.
        """
        rng = rng or random.Random()
        self.reset_border()
        if wall_probability <= 0:
            return
        for row in range(1, self.height - 1):
            for col in range(1, self.width - 1):
                if rng.random() * 100.0 < wall_probability:
                    self.cells[row][col] = CellKind.WALL

    def snapshot(self) -> Tuple[Tuple[CellKind, ...], ...]:
        return tuple(tuple(row) for row in self.cells)

    def __repr__(self):
        return f"<Grid {self.height}x{self.width}>"
