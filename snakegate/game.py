"""
SnakeGate session engine.

SnakeGame is the single session context: it owns the grid, the snake, the
item and gate managers and the mission tracker, and sequences them once
per tick. Nothing here talks to the terminal or the filesystem.
"""

import logging
import random
import time
import uuid
from typing import Callable, Dict, Iterable, Optional

from .domain.constants import (
    GATE_COOLDOWN_TICKS,
    GATE_POINTS,
    GROWTH_POINTS,
    GROWTH_SPAWN_INTERVAL,
    HEIGHT,
    LENGTH_POINTS,
    MIN_SNAKE_LENGTH,
    PAUSE,
    POISON_POINTS,
    POISON_SPAWN_INTERVAL,
    QUIT,
    VALID_MOVES,
    WALL_KINDS,
    WIDTH,
    CellKind,
    GameStatus,
    TerminalReason,
    TickOutcome,
)
from .domain.game_state import GameState
from .domain.gates import GateManager
from .domain.grid import Grid, Position
from .domain.items import ItemManager
from .domain.snake import Snake
from .domain.stage import DEFAULT_STAGES, MissionTracker, StageConfig

logger = logging.getLogger(__name__)


class SnakeGame:
    """
    One game session, from stage 0 until a win or a terminal reason.

    Call step() once per frame with the command read from the input source
    (or None). The session is reset by new_game().
    """

    def __init__(
        self,
        stages: Iterable[StageConfig] = DEFAULT_STAGES,
        height: int = HEIGHT,
        width: int = WIDTH,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        growth_interval: int = GROWTH_SPAWN_INTERVAL,
        poison_interval: int = POISON_SPAWN_INTERVAL,
        game_id: Optional[str] = None
    ):
        self.stages = tuple(stages)
        if not self.stages:
            raise ValueError("At least one stage is required.")
        if height < 3 or width < 6:
            raise ValueError(f"Board {height}x{width} is too small for a starting snake.")

        if game_id is None:
            self.game_id = str(uuid.uuid4())
        else:
            self.game_id = game_id

        self.rng = rng or random.Random(seed)
        self.grid = Grid(height, width)
        self.items = ItemManager(
            self.grid,
            self.rng,
            growth_interval=growth_interval,
            poison_interval=poison_interval,
        )
        self.gates = GateManager(self.grid, self.stages[0].gate_lifespan, self.rng)
        self.tracker = MissionTracker()
        self.snake = Snake.centered(self.grid)

        self.stage_index = 0
        self.scores: Dict[str, int] = {}
        self.status = GameStatus.PLAYING
        self.reason: Optional[TerminalReason] = None
        self.paused = False
        self.tick = 0
        self.max_length = MIN_SNAKE_LENGTH
        self.start_time = time.time()

        self.new_game()

    # ------------------------------------------------------------------
    # Session and stage lifecycle
    # ------------------------------------------------------------------

    def new_game(self) -> None:
        """Reset every session statistic and lay out stage 0."""
        self.scores = {'growth': 0, 'poison': 0, 'gate': 0}
        self.status = GameStatus.PLAYING
        self.reason = None
        self.tick = 0
        self.max_length = MIN_SNAKE_LENGTH
        self.start_time = time.time()
        self.init_stage(0)

    def init_stage(self, index: int) -> None:
        """Lay out a fresh map, snake, items and gates for stage index."""
        if not 0 <= index < len(self.stages):
            raise ValueError(f"Unknown stage {index}; {len(self.stages)} stage(s) configured.")

        stage = self.stages[index]
        self.stage_index = index
        self.tracker.reset()
        self.paused = False

        self.grid.build_layout(stage.wall_probability, self.rng)
        self.snake = Snake.centered(self.grid)
        # Keep the start corridor open, including the first cell ahead
        for pos in list(self.snake.positions) + [self.snake.next_head()]:
            self.grid.set_cell(pos, CellKind.EMPTY)
        self.snake.place(self.grid)

        self.items.reset()
        self.items.spawn_growth()
        self.items.spawn_poison()

        self.gates.reset(stage.gate_lifespan)
        self.gates.spawn_pair()

        logger.info("Game %s: stage %d started", self.game_id, index)

    def advance_stage(self) -> TickOutcome:
        if self.stage_index >= len(self.stages) - 1:
            self.status = GameStatus.WON
            logger.info("Game %s: all %d stages cleared", self.game_id, len(self.stages))
            return TickOutcome.WON

        logger.info("Game %s: stage %d cleared", self.game_id, self.stage_index)
        self.init_stage(self.stage_index + 1)
        return TickOutcome.STAGE_ADVANCE

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def set_intended_direction(self, direction: str) -> None:
        """
        Apply a directional input.

        A 180 degree reversal ends the game. While paused, any directional
        input acts as the pause toggle instead.
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction {direction!r}.")
        if self.status is not GameStatus.PLAYING:
            return
        if self.paused:
            self.toggle_pause()
            return
        if direction == self.snake.direction:
            return
        if len(self.snake) > 1 and self.snake.is_reversal(direction):
            self._terminate(TerminalReason.UTURN)
            return
        self.snake.direction = direction

    # ------------------------------------------------------------------
    # Tick resolution
    # ------------------------------------------------------------------

    def _terminate(self, reason: TerminalReason) -> TerminalReason:
        self.status = GameStatus.GAME_OVER
        self.reason = reason
        self.snake.kill(reason, self.tick)
        logger.info("Game %s over at tick %d: %s", self.game_id, self.tick, reason.message)
        return reason

    def _collision(self, pos: Position, from_gate: bool = False) -> Optional[TerminalReason]:
        if not self.grid.in_bounds(pos):
            return TerminalReason.WALL
        kind = self.grid.cell_at(pos)
        if kind in WALL_KINDS:
            return TerminalReason.WALL
        if kind == CellKind.SNAKE_BODY:
            return TerminalReason.SELF
        # Gate exits never land on a gate; if they do, it blocks like a wall
        if from_gate and kind == CellKind.GATE:
            return TerminalReason.WALL
        return None

    def resolve_tick(self) -> Optional[TerminalReason]:
        """
        Move the snake one cell and apply whatever it runs into.

        Returns:
            The TerminalReason if this tick ended the game, else None.
        """
        if self.status is not GameStatus.PLAYING:
            return self.reason

        self.tick += 1
        self.items.tick_lifespan()

        snake, grid = self.snake, self.grid
        target = snake.next_head()
        reason = self._collision(target)
        if reason is not None:
            return self._terminate(reason)

        kind = grid.cell_at(target)
        if kind == CellKind.GATE:
            if snake.gate_cooldown > 0:
                return self._terminate(TerminalReason.GATE_COOLDOWN)
            self.tracker.gates_used += 1
            self.scores['gate'] += GATE_POINTS
            target, snake.direction = self.gates.teleport(target, snake.direction)
            reason = self._collision(target, from_gate=True)
            if reason is not None:
                return self._terminate(reason)
            snake.gate_cooldown = GATE_COOLDOWN_TICKS

        grew = False
        respawn = None
        if kind == CellKind.GATE:
            # The head overwrites an item beyond the exit without eating it
            overwritten = grid.cell_at(target)
            if overwritten == CellKind.GROWTH:
                respawn = self.items.spawn_growth
            elif overwritten == CellKind.POISON:
                respawn = self.items.spawn_poison
        elif kind == CellKind.GROWTH:
            self.tracker.growth_collected += 1
            self.scores['growth'] += GROWTH_POINTS
            grew = True
            grid.set_cell(target, CellKind.EMPTY)
            respawn = self.items.spawn_growth
        elif kind == CellKind.POISON:
            self.tracker.poison_collected += 1
            self.scores['poison'] += POISON_POINTS
            snake.drop_tail(grid)
            if len(snake) < MIN_SNAKE_LENGTH:
                return self._terminate(TerminalReason.SHORT_LENGTH)
            grid.set_cell(target, CellKind.EMPTY)
            respawn = self.items.spawn_poison

        if not grew:
            snake.drop_tail(grid)
        snake.advance(grid, target)

        # Respawn only once the head is marked so the new item avoids it
        if respawn is not None:
            respawn()

        self.tracker.turns += 1
        if self.tracker.turns > self.current_stage.turn_limit:
            return self._terminate(TerminalReason.TURN_LIMIT)

        self.max_length = max(self.max_length, len(snake))

        if snake.gate_cooldown > 0:
            snake.gate_cooldown -= 1
        return None

    def mission_cleared(self) -> bool:
        return self.tracker.evaluate_clear(self.current_stage, len(self.snake))

    def step(self, command: Optional[str] = None) -> TickOutcome:
        """
        Run one frame: apply the command, resolve a tick, check the mission.

        Args:
            command: a direction, PAUSE, QUIT, or None when no key was read.
        """
        if self.status is GameStatus.WON:
            return TickOutcome.WON
        if self.status is GameStatus.GAME_OVER:
            return TickOutcome.GAME_OVER

        if command == QUIT:
            self._terminate(TerminalReason.QUIT)
            return TickOutcome.GAME_OVER
        if command == PAUSE:
            self.toggle_pause()
            return TickOutcome.CONTINUE
        if self.paused:
            if command in VALID_MOVES:
                self.set_intended_direction(command)
            return TickOutcome.CONTINUE

        # A stage already cleared advances before any steering or movement
        if self.mission_cleared():
            return self.advance_stage()

        if command in VALID_MOVES:
            self.set_intended_direction(command)
            if self.status is GameStatus.GAME_OVER:
                return TickOutcome.GAME_OVER

        if self.resolve_tick() is not None:
            return TickOutcome.GAME_OVER

        if self.gates.tick_lifespan():
            logger.debug("Game %s: gates regenerated at tick %d", self.game_id, self.tick)
        self.items.spawn_scheduled(self.tick)

        if self.mission_cleared():
            return self.advance_stage()
        return TickOutcome.CONTINUE

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_stage(self) -> StageConfig:
        return self.stages[self.stage_index]

    @property
    def tick_delay_ms(self) -> int:
        return self.current_stage.tick_delay_ms

    @property
    def game_over(self) -> bool:
        return self.status is not GameStatus.PLAYING

    @property
    def won(self) -> bool:
        return self.status is GameStatus.WON

    @property
    def total_score(self) -> int:
        """Running score shown during play."""
        return sum(self.scores.values())

    def final_score(self) -> int:
        """Score reported to the ranking when the session ends."""
        return (
            len(self.snake) * LENGTH_POINTS
            + self.scores['growth']
            - self.scores['poison']
            + self.scores['gate']
        )

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        stage = self.current_stage
        return GameState(
            tick=self.tick,
            stage_index=self.stage_index,
            stage_count=len(self.stages),
            cells=self.grid.snapshot(),
            snake_positions=list(self.snake.positions),
            direction=self.snake.direction,
            scores=self.scores.copy(),
            missions=self.tracker.status(stage, len(self.snake)),
            turns_used=self.tracker.turns,
            turn_limit=stage.turn_limit,
            item_frames_left=self.items.frames_left,
            gate_ticks_left=self.gates.ticks_left,
            gate_cooldown=self.snake.gate_cooldown,
            max_length=self.max_length,
            paused=self.paused,
            game_over=self.game_over,
            won=self.won,
            reason=self.reason
        )

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.get_current_state().print_board() + "\n")

    def __repr__(self):
        return (
            f"<SnakeGame id={self.game_id} stage={self.stage_index} tick={self.tick} "
            f"status={self.status.value} length={len(self.snake)}>"
        )


def run_session(
    game: SnakeGame,
    player,
    render: Optional[Callable[[GameState], None]] = None,
    on_stage_advance: Optional[Callable[[int], None]] = None,
    set_delay: Optional[Callable[[int], None]] = None,
    max_frames: Optional[int] = None
) -> TickOutcome:
    """
    Drive a session frame by frame until it ends.

    Each frame renders the current snapshot, asks the player for a command
    and steps the game.

    Args:
        game: the session to run
        player: anything with get_move(GameState) -> Optional[str]
        render: render sink, called with a consistent snapshot every frame
        on_stage_advance: called with the index of the stage just cleared
        set_delay: told the poll timeout in ms after each frame (-1 = block,
            used while paused)
        max_frames: safety bound for unattended runs

    Returns:
        The last TickOutcome (GAME_OVER or WON unless max_frames was hit).
    """
    outcome = TickOutcome.CONTINUE
    frames = 0
    while not game.game_over:
        if max_frames is not None and frames >= max_frames:
            break
        frames += 1

        state = game.get_current_state()
        if render is not None:
            render(state)
        command = player.get_move(state)
        cleared = game.stage_index
        outcome = game.step(command)

        if set_delay is not None:
            set_delay(-1 if game.paused else game.tick_delay_ms)
        if outcome is TickOutcome.STAGE_ADVANCE and on_stage_advance is not None:
            on_stage_advance(cleared)
    return outcome
