"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import List, Tuple, Dict, Optional

from .constants import CellKind, TerminalReason

CELL_SYMBOLS = {
    CellKind.EMPTY: '.',
    CellKind.WALL: '#',
    CellKind.IMMUNE_WALL: '+',
    CellKind.SNAKE_BODY: 'o',
    CellKind.GROWTH: 'G',
    CellKind.POISON: 'P',
    CellKind.GATE: '@',
}


class GameState:
    """
    A snapshot of the game at a specific point in time.

    This is what the render sink receives; the grid it carries is always
    consistent with snake_positions.

    Attributes:
        tick: ticks resolved so far in this session
        stage_index, stage_count: current stage (0-based) and how many exist
        cells: rows of CellKind, row 0 at the top
        snake_positions: list of (row, col), head first
        direction: current facing of the snake
        scores: dict with 'growth', 'poison' and 'gate' totals
        missions: mission name -> (current, required, done)
        turns_used, turn_limit: stage turn counter and its limit
        item_frames_left: shared item lifespan countdown
        gate_ticks_left: remaining gate lifespan, None without gates
        gate_cooldown: ticks before another gate may be entered
        max_length: longest the snake has been this session
        paused, game_over, won: session flags
        reason: TerminalReason when game_over and not won
    """

    def __init__(
        self,
        tick: int,
        stage_index: int,
        stage_count: int,
        cells: Tuple[Tuple[CellKind, ...], ...],
        snake_positions: List[Tuple[int, int]],
        direction: str,
        scores: Dict[str, int],
        missions: Dict[str, Tuple[int, int, bool]],
        turns_used: int,
        turn_limit: int,
        item_frames_left: int,
        gate_ticks_left: Optional[int],
        gate_cooldown: int,
        max_length: int,
        paused: bool = False,
        game_over: bool = False,
        won: bool = False,
        reason: Optional[TerminalReason] = None
    ):
        self.tick = tick
        self.stage_index = stage_index
        self.stage_count = stage_count
        self.cells = cells
        self.snake_positions = snake_positions
        self.direction = direction
        self.scores = scores
        self.missions = missions
        self.turns_used = turns_used
        self.turn_limit = turn_limit
        self.item_frames_left = item_frames_left
        self.gate_ticks_left = gate_ticks_left
        self.gate_cooldown = gate_cooldown
        self.max_length = max_length
        self.paused = paused
        self.game_over = game_over
        self.won = won
        self.reason = reason

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    @property
    def head(self) -> Optional[Tuple[int, int]]:
        return self.snake_positions[0] if self.snake_positions else None

    @property
    def total_score(self) -> int:
        return sum(self.scores.values())

    @property
    def turns_remaining(self) -> int:
        return self.turn_limit - self.turns_used

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty    # = wall    + = immune wall
        G = growth   P = poison  @ = gate
        H = snake head, o = snake body
        Row 0 is printed first, with column labels at the bottom.
        """
        board = [[CELL_SYMBOLS[kind] for kind in row] for row in self.cells]
        if self.head is not None:
            row, col = self.head
            board[row][col] = 'H'

        result = []
        for row in range(self.height):
            result.append(f"{row:2d} {' '.join(board[row])}")

        # Only the last digit fits above a single-character column
        result.append("   " + " ".join(str(col % 10) for col in range(self.width)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, stage={self.stage_index}, "
            f"length={len(self.snake_positions)}, scores={self.scores}>"
        )
