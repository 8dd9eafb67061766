"""
Shared builders for deterministic game scenarios.
"""

import random

from snakegate.domain.constants import CellKind, RIGHT
from snakegate.domain.snake import Snake
from snakegate.domain.stage import StageConfig
from snakegate.game import SnakeGame


def open_stage(**overrides) -> StageConfig:
    """A wall-free stage whose missions are out of reach unless overridden."""
    values = dict(
        wall_probability=0,
        mission_length=100,
        mission_growth=100,
        mission_poison=100,
        mission_gate=100,
        turn_limit=1000,
        tick_delay_ms=100,
        gate_lifespan=1000,
    )
    values.update(overrides)
    return StageConfig(**values)


def make_game(stages=None, seed=7) -> SnakeGame:
    """A bordered 21x21 board with no items or gates and no scheduled spawns."""
    game = SnakeGame(
        stages=stages or [open_stage()],
        rng=random.Random(seed),
        growth_interval=0,
        poison_interval=0,
        game_id="test",
    )
    clear_board(game)
    return game


def clear_board(game: SnakeGame) -> None:
    game.items.clear_all()
    game.gates.clear()


def set_snake(game: SnakeGame, positions, direction=RIGHT) -> Snake:
    for pos in game.snake.positions:
        game.grid.set_cell(pos, CellKind.EMPTY)
    game.snake = Snake(positions, direction)
    game.snake.place(game.grid)
    return game.snake


def assert_in_sync(game: SnakeGame) -> None:
    """Every segment is marked SnakeBody and nothing else is."""
    body_cells = set(game.grid.cells_of(CellKind.SNAKE_BODY))
    assert len(game.snake) == len(body_cells)
    assert set(game.snake.positions) == body_cells
