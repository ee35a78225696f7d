"""
Tests for the session reducer: movement, collisions, growth, input gating
and restart.
"""

import pytest
import sys
import os
import random
from dataclasses import replace

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain import (
    Snake, SessionState, Tick, SetDirection, Restart, initial_state, reduce,
    UP, DOWN, LEFT, RIGHT, INITIAL_SNAKE, BOARD_SIZE,
)
from domain.constants import DIRECTION_DELTAS


def make_state(positions, direction=RIGHT, food=(0, 0), board_size=BOARD_SIZE, **kwargs):
    return SessionState(
        snake=Snake(positions),
        direction=direction,
        pending_direction=kwargs.pop("pending_direction", direction),
        food=food,
        board_size=board_size,
        **kwargs
    )


@pytest.fixture
def rng():
    return random.Random(42)


class TestInitialState:
    """Tests for initial_state()."""

    def test_initial_values(self, rng):
        state = initial_state(rng)
        assert list(state.snake) == list(INITIAL_SNAKE)
        assert state.direction == RIGHT
        assert state.pending_direction == RIGHT
        assert state.score == 0
        assert state.game_over is False
        assert state.won is False
        assert state.death_reason is None
        assert state.tick == 0

    def test_initial_food_not_on_snake(self):
        for seed in range(50):
            state = initial_state(random.Random(seed))
            assert state.food is not None
            assert state.food not in state.snake.positions

    def test_snake_out_of_bounds_raises(self, rng):
        with pytest.raises(ValueError):
            initial_state(rng, snake=Snake([(20, 5)]))

    def test_invalid_direction_raises(self, rng):
        with pytest.raises(ValueError):
            initial_state(rng, direction="SIDEWAYS")


class TestMovement:
    """Tests for the Tick message."""

    @pytest.mark.parametrize("direction", [UP, DOWN, RIGHT])
    def test_head_moves_by_direction_delta(self, rng, direction):
        state = make_state([(10, 10), (9, 10), (8, 10)], direction=RIGHT, pending_direction=direction)
        new_state = reduce(state, Tick(), rng)

        dx, dy = DIRECTION_DELTAS[direction]
        assert new_state.snake.head == (10 + dx, 10 + dy)
        assert len(new_state.snake) == 3
        assert new_state.direction == direction
        assert new_state.tick == 1

    def test_tail_follows(self, rng):
        state = make_state([(10, 10), (9, 10), (8, 10)])
        new_state = reduce(state, Tick(), rng)
        assert list(new_state.snake) == [(11, 10), (10, 10), (9, 10)]

    def test_reduce_does_not_mutate_input(self, rng):
        state = make_state([(10, 10), (9, 10)])
        reduce(state, Tick(), rng)
        assert list(state.snake) == [(10, 10), (9, 10)]
        assert state.tick == 0

    def test_wall_collision_right_edge(self, rng):
        """Head at (19,10) moving RIGHT hits the wall on the next tick."""
        state = make_state([(19, 10), (18, 10), (17, 10)])
        new_state = reduce(state, Tick(), rng)

        assert new_state.game_over is True
        assert new_state.death_reason == "wall"
        assert new_state.won is False
        # No wraparound and nothing else changes
        assert new_state.snake == state.snake
        assert new_state.score == state.score
        assert new_state.tick == state.tick

    @pytest.mark.parametrize("positions,direction", [
        ([(0, 5), (1, 5)], LEFT),
        ([(5, 0), (5, 1)], UP),
        ([(5, 19), (5, 18)], DOWN),
    ])
    def test_wall_collision_other_edges(self, rng, positions, direction):
        state = make_state(positions, direction=direction, food=(10, 10))
        assert reduce(state, Tick(), rng).death_reason == "wall"

    def test_self_collision(self, rng):
        """A snake of length 5 curling into its own body ends the game."""
        # Head moved LEFT from (6,5); turning DOWN lands on (5,6)
        state = make_state(
            [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)],
            direction=LEFT,
        )
        state = reduce(state, SetDirection(DOWN), rng)
        new_state = reduce(state, Tick(), rng)

        assert new_state.game_over is True
        assert new_state.death_reason == "self"
        assert new_state.snake == state.snake

    def test_moving_into_current_tail_is_a_collision(self, rng):
        """Self-collision is checked against the pre-move body."""
        state = make_state([(5, 5), (6, 5), (6, 6), (5, 6)], direction=LEFT, pending_direction=DOWN)
        assert reduce(state, Tick(), rng).death_reason == "self"

    def test_tick_after_game_over_is_noop(self, rng):
        state = make_state([(19, 10), (18, 10)])
        over = reduce(state, Tick(), rng)
        assert reduce(over, Tick(), rng) is over


class TestEating:
    """Tests for food consumption and growth."""

    def test_eating_food(self, rng):
        """Score +1, length +1, new food off the snake."""
        state = make_state([(5, 5), (4, 5), (3, 5)], food=(6, 5))
        new_state = reduce(state, Tick(), rng)

        assert new_state.score == 1
        assert len(new_state.snake) == 4
        assert list(new_state.snake) == [(6, 5), (5, 5), (4, 5), (3, 5)]
        assert new_state.food is not None
        assert new_state.food not in new_state.snake.positions
        assert new_state.game_over is False

    def test_filling_the_board_wins(self, rng):
        """Eating the last free cell ends the game as a win."""
        state = make_state(
            [(0, 0), (0, 1), (1, 1)],
            direction=UP,
            pending_direction=RIGHT,
            food=(1, 0),
            board_size=2,
        )
        new_state = reduce(state, Tick(), rng)

        assert new_state.game_over is True
        assert new_state.won is True
        assert new_state.death_reason == "board_full"
        assert new_state.food is None
        assert new_state.score == 1
        assert len(new_state.snake) == 4

    def test_random_play_invariants(self):
        """
        Over a long random session: head moves by the delta, length only
        grows with score and food never lands on the snake.
        """
        rng = random.Random(3)
        inputs = random.Random(4)
        state = initial_state(rng)

        for _ in range(2000):
            if state.game_over:
                state = reduce(state, Restart(), rng)
                continue

            state = reduce(state, SetDirection(inputs.choice([UP, DOWN, LEFT, RIGHT])), rng)
            before = state
            state = reduce(state, Tick(), rng)
            if state.game_over:
                continue

            dx, dy = DIRECTION_DELTAS[before.pending_direction]
            hx, hy = before.snake.head
            assert state.snake.head == (hx + dx, hy + dy)
            assert len(state.snake) - len(before.snake) == state.score - before.score
            assert state.score - before.score in (0, 1)
            assert state.food not in state.snake.positions
            assert len(set(state.snake.positions)) == len(state.snake)


class TestDirectionInput:
    """Tests for the SetDirection message."""

    def test_perpendicular_turn_accepted(self, rng):
        state = make_state([(10, 10), (9, 10)])
        assert reduce(state, SetDirection(UP), rng).pending_direction == UP

    def test_reversal_ignored(self, rng):
        state = make_state([(10, 10), (9, 10)])
        assert reduce(state, SetDirection(LEFT), rng).pending_direction == RIGHT

    def test_input_does_not_change_committed_direction(self, rng):
        state = make_state([(10, 10), (9, 10)])
        new_state = reduce(state, SetDirection(UP), rng)
        assert new_state.direction == RIGHT
        assert new_state.snake == state.snake

    def test_reversal_gated_on_committed_direction(self, rng):
        """UP then LEFT between two ticks cannot reverse a snake moving RIGHT."""
        state = make_state([(10, 10), (9, 10)])
        state = reduce(state, SetDirection(UP), rng)
        state = reduce(state, SetDirection(LEFT), rng)
        assert state.pending_direction == UP

        state = reduce(state, Tick(), rng)
        assert state.snake.head == (10, 9)
        assert state.game_over is False

        # After the tick UP is committed, so LEFT is now a legal turn
        state = reduce(state, SetDirection(LEFT), rng)
        assert state.pending_direction == LEFT

    def test_unknown_direction_ignored(self, rng):
        state = make_state([(10, 10), (9, 10)])
        assert reduce(state, SetDirection("NORTH"), rng) is state

    def test_input_ignored_after_game_over(self, rng):
        over = reduce(make_state([(19, 10), (18, 10)]), Tick(), rng)
        assert reduce(over, SetDirection(UP), rng) is over


class TestRestart:
    """Tests for the Restart message."""

    def test_restart_after_game_over(self, rng):
        state = make_state([(19, 10), (18, 10)], score=7)
        over = reduce(replace(state, pending_direction=UP), Tick(), rng)
        over = reduce(replace(over, pending_direction=RIGHT), Tick(), rng)
        assert over.game_over is True

        fresh = reduce(over, Restart(), rng)
        assert fresh.game_over is False
        assert fresh.score == 0
        assert fresh.tick == 0
        assert fresh.death_reason is None
        assert list(fresh.snake) == list(INITIAL_SNAKE)
        assert fresh.direction == RIGHT
        assert fresh.pending_direction == RIGHT
        assert fresh.food not in fresh.snake.positions

    def test_restart_keeps_board_size(self, rng):
        state = make_state([(10, 10)], board_size=15)
        assert reduce(state, Restart(), rng).board_size == 15

    def test_unknown_message_ignored(self, rng):
        state = make_state([(10, 10)])
        assert reduce(state, object(), rng) is state
