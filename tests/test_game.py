"""
Tests for game.py - the tick engine and stage progression.

Scenarios are built on an open 21x21 board (border walls only) with items
and gates placed by hand, so every tick is deterministic.
"""

import random
import sys
import os

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snakegate.domain.constants import (
    UP, DOWN, LEFT, RIGHT, PAUSE, QUIT,
    CellKind, GameStatus, TerminalReason, TickOutcome,
)
from snakegate.game import SnakeGame, run_session
from snakegate.players.random_player import RandomPlayer
from helpers import open_stage, make_game, clear_board, set_snake, assert_in_sync


class TestNewGame:
    """Tests for a freshly started session."""

    def test_default_game_starts_on_stage_zero(self):
        """A default session lays out stage 0 with a centred length-3 snake."""
        game = SnakeGame(seed=1)
        assert game.stage_index == 0
        assert game.status is GameStatus.PLAYING
        assert list(game.snake.positions) == [(10, 10), (10, 9), (10, 8)]
        assert game.snake.direction == RIGHT
        assert game.tick_delay_ms == 220
        assert_in_sync(game)

    def test_default_game_spawns_items_and_gates(self):
        """Stage start spawns one item of each kind and a gate pair."""
        game = SnakeGame(seed=1)
        assert game.grid.count(CellKind.GROWTH) == 1
        assert game.grid.count(CellKind.POISON) == 1
        assert game.grid.count(CellKind.GATE) == 2
        assert game.items.frames_left == game.items.lifespan

    def test_start_corridor_is_clear(self):
        """The cell ahead of the head is never a wall at stage start."""
        for seed in range(20):
            game = SnakeGame(seed=seed)
            assert game.grid.cell_at(game.snake.next_head()) != CellKind.WALL

    def test_same_seed_same_layout(self):
        """Seeding the session reproduces the map."""
        first = SnakeGame(seed=42)
        second = SnakeGame(seed=42)
        assert first.grid.snapshot() == second.grid.snapshot()

    def test_empty_stage_list_rejected(self):
        with pytest.raises(ValueError):
            SnakeGame(stages=[])

    def test_new_game_resets_session(self):
        """new_game() clears scores, status and the tick count."""
        game = make_game()
        game.scores['growth'] = 50
        game.step(LEFT)
        assert game.game_over

        game.new_game()
        assert game.status is GameStatus.PLAYING
        assert game.reason is None
        assert game.tick == 0
        assert game.scores == {'growth': 0, 'poison': 0, 'gate': 0}


class TestMovement:
    """Tests for plain movement and collisions."""

    def test_normal_move_keeps_length(self):
        game = make_game()
        outcome = game.step()
        assert outcome is TickOutcome.CONTINUE
        assert list(game.snake.positions) == [(10, 11), (10, 10), (10, 9)]
        assert game.grid.cell_at((10, 8)) == CellKind.EMPTY
        assert game.tracker.turns == 1
        assert_in_sync(game)

    def test_turn_changes_direction(self):
        game = make_game()
        game.step(UP)
        assert game.snake.head == (9, 10)
        assert game.snake.direction == UP

    def test_wall_collision(self):
        game = make_game()
        set_snake(game, [(1, 10), (2, 10), (3, 10)], UP)
        outcome = game.step()
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.WALL
        assert game.snake.head == (1, 10)
        assert game.snake.alive is False
        assert game.snake.death_reason is TerminalReason.WALL

    def test_out_of_bounds_counts_as_wall(self):
        """Leaving the grid is reported with the wall reason."""
        game = make_game()
        set_snake(game, [(0, 10), (1, 10), (2, 10)], UP)
        game.step()
        assert game.reason is TerminalReason.WALL

    def test_self_collision(self):
        game = make_game()
        set_snake(game, [(10, 10), (10, 11), (11, 11), (11, 10), (11, 9)], DOWN)
        game.step()
        assert game.reason is TerminalReason.SELF
        assert_in_sync(game)

    def test_moving_into_own_tail_is_fatal(self):
        """The tail is still on the board when the head arrives."""
        game = make_game()
        set_snake(game, [(10, 10), (10, 11), (11, 11), (11, 10)], DOWN)
        game.step()
        assert game.reason is TerminalReason.SELF

    def test_turn_limit(self):
        game = make_game([open_stage(turn_limit=2)])
        assert game.step() is TickOutcome.CONTINUE
        assert game.step() is TickOutcome.CONTINUE
        assert game.step() is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.TURN_LIMIT

    def test_max_length_tracked(self):
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        game.step()
        assert game.max_length == 4


class TestDirectionInput:
    """Tests for U-turns, pause and quit."""

    def test_reversal_is_lethal(self):
        game = make_game()
        outcome = game.step(LEFT)
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.UTURN
        assert game.snake.head == (10, 10)
        assert game.tick == 0

    @pytest.mark.parametrize("facing,reverse", [(UP, DOWN), (DOWN, UP), (LEFT, RIGHT), (RIGHT, LEFT)])
    def test_reversal_lethal_in_every_direction(self, facing, reverse):
        game = make_game()
        game.snake.direction = facing
        game.set_intended_direction(reverse)
        assert game.reason is TerminalReason.UTURN

    def test_reversal_ignores_board_contents(self):
        """A reversal ends the game even with an item right behind the head."""
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        game.set_intended_direction(LEFT)
        assert game.reason is TerminalReason.UTURN

    def test_same_direction_is_noop(self):
        game = make_game()
        game.set_intended_direction(RIGHT)
        assert game.status is GameStatus.PLAYING
        assert game.snake.direction == RIGHT

    def test_unknown_direction_rejected(self):
        game = make_game()
        with pytest.raises(ValueError):
            game.set_intended_direction("SIDEWAYS")

    def test_pause_stops_ticks(self):
        game = make_game()
        assert game.step(PAUSE) is TickOutcome.CONTINUE
        assert game.paused is True
        game.step()
        game.step()
        assert game.tick == 0
        assert game.snake.head == (10, 10)

    def test_reverse_key_while_paused_unpauses(self):
        """While paused a directional key toggles pause instead of steering."""
        game = make_game()
        game.step(PAUSE)
        outcome = game.step(LEFT)
        assert outcome is TickOutcome.CONTINUE
        assert game.paused is False
        assert game.status is GameStatus.PLAYING
        assert game.snake.direction == RIGHT
        assert game.tick == 0

    def test_pause_toggles_back(self):
        game = make_game()
        game.step(PAUSE)
        game.step(PAUSE)
        assert game.paused is False
        game.step()
        assert game.tick == 1

    def test_quit_ends_immediately(self):
        game = make_game()
        outcome = game.step(QUIT)
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.QUIT
        assert game.tick == 0

    def test_finished_game_ignores_input(self):
        game = make_game()
        game.step(QUIT)
        assert game.step(UP) is TickOutcome.GAME_OVER
        assert game.tick == 0


class TestItems:
    """Tests for eating growth and poison items."""

    def test_growth_keeps_tail(self):
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        game.step()
        assert list(game.snake.positions) == [(10, 11), (10, 10), (10, 9), (10, 8)]
        assert game.tracker.growth_collected == 1
        assert game.scores['growth'] == 10
        assert_in_sync(game)

    def test_growth_respawns_elsewhere(self):
        """Eating a growth item spawns the next one, never under the head."""
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        game.step()
        growth_cells = game.grid.cells_of(CellKind.GROWTH)
        assert len(growth_cells) == 1
        assert growth_cells[0] not in game.snake.positions
        assert game.items.frames_left == game.items.lifespan

    def test_poison_removes_one_segment_same_tick(self):
        game = make_game()
        set_snake(game, [(10, 10), (10, 9), (10, 8), (10, 7)], RIGHT)
        game.grid.set_cell((10, 11), CellKind.POISON)
        game.step()
        assert list(game.snake.positions) == [(10, 11), (10, 10), (10, 9)]
        assert game.grid.cell_at((10, 7)) == CellKind.EMPTY
        assert game.grid.cell_at((10, 8)) == CellKind.EMPTY
        assert game.tracker.poison_collected == 1
        assert game.scores['poison'] == -5
        assert game.grid.count(CellKind.POISON) == 1
        assert_in_sync(game)

    def test_poison_below_minimum_length(self):
        """Poison at length 3 ends the game even though the cell is open."""
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.POISON)
        outcome = game.step()
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.SHORT_LENGTH
        assert game.snake.head == (10, 10)
        assert len(game.snake) == 2
        assert_in_sync(game)

    def test_items_expire_together(self):
        game = make_game()
        game.grid.set_cell((5, 5), CellKind.GROWTH)
        game.grid.set_cell((15, 5), CellKind.POISON)
        game.items.frames_left = 1
        game.step()
        assert game.grid.count(CellKind.GROWTH) == 0
        assert game.grid.count(CellKind.POISON) == 0

    def test_expired_item_ahead_is_not_eaten(self):
        """Expiry runs before the move, so a just-cleared cell is empty."""
        game = make_game()
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        game.items.frames_left = 1
        game.step()
        assert len(game.snake) == 3
        assert game.tracker.growth_collected == 0

    def test_scheduled_spawns(self):
        game = SnakeGame(stages=[open_stage()], rng=random.Random(3),
                         growth_interval=2, poison_interval=0)
        clear_board(game)
        game.step()
        assert game.grid.count(CellKind.GROWTH) == 0
        game.step()
        assert game.grid.count(CellKind.GROWTH) == 1
        assert game.grid.count(CellKind.POISON) == 0


class TestGates:
    """Tests for entering gates."""

    def test_teleport_from_border_exit(self):
        game = make_game()
        game.gates.set_pair((10, 11), (0, 5))
        outcome = game.step()
        assert outcome is TickOutcome.CONTINUE
        assert game.snake.head == (1, 5)
        assert game.snake.direction == DOWN
        assert len(game.snake) == 3
        assert game.tracker.gates_used == 1
        assert game.scores['gate'] == 20
        assert game.grid.cell_at((10, 11)) == CellKind.GATE
        assert game.grid.cell_at((0, 5)) == CellKind.GATE
        assert_in_sync(game)

    def test_cooldown_armed_after_use(self):
        """Cooldown is armed on use and counts down at the end of the tick."""
        game = make_game()
        game.gates.set_pair((10, 11), (0, 5))
        game.step()
        assert game.snake.gate_cooldown == 4
        game.step()
        assert game.snake.gate_cooldown == 3

    def test_gate_during_cooldown_is_fatal(self):
        game = make_game()
        game.gates.set_pair((10, 11), (0, 5))
        game.step()
        # Put the next gate straight below the snake's new heading
        game.gates.set_pair((2, 5), (20, 7))
        outcome = game.step()
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.GATE_COOLDOWN
        assert game.snake.head == (1, 5)
        assert game.tracker.gates_used == 1

    def test_gate_usable_after_cooldown(self):
        game = make_game()
        game.snake.gate_cooldown = 0
        game.gates.set_pair((10, 11), (20, 5))
        game.step()
        assert game.snake.head == (19, 5)
        assert game.snake.direction == UP

    def test_blocked_exit_is_fatal(self):
        """An exit gate boxed in by walls sends the head into a wall."""
        game = make_game()
        for pos in [(4, 5), (6, 5), (5, 4), (5, 6)]:
            game.grid.set_cell(pos, CellKind.WALL)
        game.gates.set_pair((10, 11), (5, 5))
        outcome = game.step()
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.WALL
        assert game.snake.head == (10, 10)

    def test_exit_onto_growth_does_not_eat_it(self):
        """A gate tick gives only the gate effect; the item under the exit is overwritten."""
        game = make_game()
        game.gates.set_pair((10, 11), (0, 5))
        game.grid.set_cell((1, 5), CellKind.GROWTH)
        game.step()
        assert game.snake.head == (1, 5)
        assert len(game.snake) == 3
        assert game.tracker.growth_collected == 0
        assert game.scores['growth'] == 0
        assert game.tracker.gates_used == 1
        assert game.grid.count(CellKind.GROWTH) == 1
        assert (1, 5) not in game.grid.cells_of(CellKind.GROWTH)
        assert_in_sync(game)

    def test_exit_onto_poison_at_minimum_length(self):
        """Poison beyond the exit cannot shorten a length-3 snake below the minimum."""
        game = make_game()
        game.gates.set_pair((10, 11), (0, 5))
        game.grid.set_cell((1, 5), CellKind.POISON)
        outcome = game.step()
        assert outcome is TickOutcome.CONTINUE
        assert game.reason is None
        assert len(game.snake) == 3
        assert game.tracker.poison_collected == 0
        assert game.scores['poison'] == 0
        assert game.grid.count(CellKind.POISON) == 1
        assert_in_sync(game)

    def test_gates_regenerate_after_lifespan(self):
        game = make_game([open_stage(gate_lifespan=2)])
        game.gates.set_pair((0, 3), (0, 4))
        game.step()
        assert game.gates.pair == ((0, 3), (0, 4))
        game.step()
        assert game.gates.elapsed == 0
        assert game.grid.count(CellKind.GATE) == 2


class TestStageProgression:
    """Tests for mission clears, stage transitions and winning."""

    def test_clear_advances_stage_and_resets_counters(self):
        stages = [
            open_stage(mission_length=6, mission_growth=3, mission_poison=0, mission_gate=0),
            open_stage(tick_delay_ms=50, wall_probability=30),
        ]
        game = make_game(stages)
        border_walls = game.grid.count(CellKind.WALL)
        outcomes = []
        for _ in range(3):
            game.items.clear_all()
            game.grid.set_cell(game.snake.next_head(), CellKind.GROWTH)
            outcomes.append(game.step())

        assert outcomes == [TickOutcome.CONTINUE, TickOutcome.CONTINUE, TickOutcome.STAGE_ADVANCE]
        assert game.stage_index == 1
        assert game.tracker.growth_collected == 0
        assert game.tracker.poison_collected == 0
        assert game.tracker.gates_used == 0
        assert game.tracker.turns == 0
        assert list(game.snake.positions) == [(10, 10), (10, 9), (10, 8)]
        assert game.tick_delay_ms == 50
        assert game.scores['growth'] == 30
        assert game.max_length == 6
        assert_in_sync(game)
        assert game.grid.count(CellKind.WALL) + game.grid.count(CellKind.GATE) > border_walls
        assert game.grid.count(CellKind.GATE) == 2

    def test_advance_lays_out_fresh_stage(self):
        """The next stage gets a new wall layout, one item of each kind and a new gate pair."""
        stages = [
            open_stage(mission_length=3, mission_growth=0, mission_poison=0, mission_gate=0),
            open_stage(wall_probability=30),
        ]
        game = make_game(stages)
        border_walls = game.grid.count(CellKind.WALL)
        before = game.grid.snapshot()

        assert game.step() is TickOutcome.STAGE_ADVANCE

        assert game.grid.snapshot() != before
        # Inner walls were drawn; the gate pair is carved out of walls
        assert game.grid.count(CellKind.WALL) + game.grid.count(CellKind.GATE) > border_walls
        assert game.grid.count(CellKind.GROWTH) == 1
        assert game.grid.count(CellKind.POISON) == 1
        assert game.grid.count(CellKind.GATE) == 2
        assert game.gates.pair is not None
        assert game.gates.elapsed == 0
        assert game.gates.lifespan == stages[1].gate_lifespan
        assert game.items.frames_left == game.items.lifespan
        for pos in [(10, 10), (10, 9), (10, 8)]:
            assert game.grid.cell_at(pos) == CellKind.SNAKE_BODY
        assert_in_sync(game)

    def test_three_of_four_missions_do_not_clear(self):
        stages = [
            open_stage(mission_length=3, mission_growth=1, mission_poison=0, mission_gate=1),
            open_stage(),
        ]
        game = make_game(stages)
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        assert game.step() is TickOutcome.CONTINUE
        assert game.stage_index == 0

    def test_last_stage_clear_wins(self):
        game = make_game([open_stage(mission_length=3, mission_growth=1,
                                     mission_poison=0, mission_gate=0)])
        game.grid.set_cell((10, 11), CellKind.GROWTH)
        outcome = game.step()
        assert outcome is TickOutcome.WON
        assert game.status is GameStatus.WON
        assert game.won is True
        assert game.reason is None

    def test_win_beats_collision_on_same_tick(self):
        """A cleared final stage wins before the snake can hit the wall."""
        stages = [open_stage(), open_stage(mission_length=3, mission_growth=0,
                                           mission_poison=0, mission_gate=0)]
        game = make_game(stages)
        game.init_stage(1)
        clear_board(game)
        set_snake(game, [(1, 10), (2, 10), (3, 10)], UP)

        outcome = game.step()
        assert outcome is TickOutcome.WON
        assert game.reason is None
        assert game.snake.head == (1, 10)

    def test_win_beats_reversal_on_same_tick(self):
        """A cleared final stage wins before a U-turn key is applied."""
        game = make_game([open_stage(mission_length=3, mission_growth=0,
                                     mission_poison=0, mission_gate=0)])
        outcome = game.step(LEFT)
        assert outcome is TickOutcome.WON
        assert game.reason is None
        assert game.snake.direction == RIGHT

    def test_scores_persist_across_stages(self):
        stages = [
            open_stage(mission_length=3, mission_growth=0, mission_poison=0, mission_gate=1),
            open_stage(),
        ]
        game = make_game(stages)
        game.gates.set_pair((10, 11), (0, 5))
        assert game.step() is TickOutcome.STAGE_ADVANCE
        assert game.scores['gate'] == 20
        assert game.tracker.gates_used == 0

    def test_unknown_stage_rejected(self):
        game = make_game()
        with pytest.raises(ValueError):
            game.init_stage(5)


class TestScoring:
    """Tests for the running and final score."""

    def test_final_score_formula(self):
        game = make_game()
        game.scores = {'growth': 30, 'poison': -10, 'gate': 20}
        assert game.final_score() == 3 * 100 + 30 - (-10) + 20

    def test_total_score_sums_categories(self):
        game = make_game()
        game.scores = {'growth': 30, 'poison': -10, 'gate': 20}
        assert game.total_score == 40


class TestSnapshot:
    """Tests for get_current_state()."""

    def test_snapshot_reflects_session(self):
        game = make_game()
        game.step()
        state = game.get_current_state()
        assert state.tick == 1
        assert state.snake_positions == list(game.snake.positions)
        assert state.turns_used == 1
        assert state.turn_limit == 1000
        assert state.missions['length'] == (3, 100, False)
        assert state.gate_ticks_left is None
        assert state.game_over is False

    def test_snapshot_is_detached(self):
        """Later ticks do not change an earlier snapshot."""
        game = make_game()
        state = game.get_current_state()
        game.step()
        assert state.snake_positions[0] == (10, 10)
        assert state.cells[10][11] == CellKind.EMPTY


class TestRunSession:
    """Tests for the frame loop that connects input, engine and renderer."""

    def test_runs_until_game_over(self):
        game = make_game()

        class Scripted:
            def __init__(self, commands):
                self.commands = list(commands)

            def get_move(self, state):
                return self.commands.pop(0) if self.commands else None

        frames = []
        delays = []
        outcome = run_session(game, Scripted([None, UP, LEFT, RIGHT]),
                              render=frames.append, set_delay=delays.append)
        assert outcome is TickOutcome.GAME_OVER
        assert game.reason is TerminalReason.UTURN
        assert len(frames) == 4
        assert delays[0] == 100

    def test_max_frames_bound(self):
        game = make_game()

        class Idle:
            def get_move(self, state):
                return None

        outcome = run_session(game, Idle(), max_frames=3)
        assert outcome is TickOutcome.CONTINUE
        assert game.tick == 3

    def test_paused_poll_blocks(self):
        game = make_game()

        class PauseThenQuit:
            def __init__(self):
                self.commands = [PAUSE, QUIT]

            def get_move(self, state):
                return self.commands.pop(0)

        delays = []
        run_session(game, PauseThenQuit(), set_delay=delays.append)
        assert delays[0] == -1

    def test_stage_advance_callback(self):
        stages = [open_stage(mission_length=3, mission_growth=0, mission_poison=0, mission_gate=0),
                  open_stage(turn_limit=1)]
        game = make_game(stages)

        class Idle:
            def get_move(self, state):
                return None

        cleared = []
        run_session(game, Idle(), on_stage_advance=cleared.append, max_frames=10)
        assert cleared == [0]

    def test_grid_and_snake_stay_in_sync(self):
        """Invariant check across many autopilot frames on real stages."""
        for seed in range(5):
            game = SnakeGame(seed=seed)
            player = RandomPlayer(rng=random.Random(seed))

            def check(state, game=game):
                assert_in_sync(game)

            run_session(game, player, render=check, max_frames=400)
            assert_in_sync(game)
