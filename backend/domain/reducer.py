"""
Session state and the reducer that advances it.

Every transition of a game session goes through reduce(): a Tick moves the
snake, a SetDirection updates the pending direction and a Restart rebuilds
the initial state. The function never mutates its input.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .board import in_bounds, place_food
from .constants import (
    BOARD_FULL,
    BOARD_SIZE,
    DEATH_SELF,
    DEATH_WALL,
    DIRECTION_DELTAS,
    INITIAL_DIRECTION,
    INITIAL_SNAKE,
    OPPOSITE,
    VALID_MOVES,
)
from .messages import Restart, SetDirection, Tick
from .snake import Snake

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


@dataclass(frozen=True)
class SessionState:
    """
    Full state of one game session.

    Attributes:
        snake: current snake body, head first
        direction: committed direction, i.e. the one applied by the last
            completed tick
        pending_direction: direction the next tick will apply
        food: food cell, or None once the snake fills the board
        score: apples eaten since the last (re)start
        game_over: True once a collision happened or the board is full
        won: True when the game ended because the board is full
        death_reason: 'wall', 'self' or 'board_full' once the game is over
        tick: number of completed ticks
        board_size: width and height of the square board
    """

    snake: Snake
    direction: str
    pending_direction: str
    food: Optional[Cell]
    score: int = 0
    game_over: bool = False
    won: bool = False
    death_reason: Optional[str] = None
    tick: int = 0
    board_size: int = BOARD_SIZE


def initial_state(
    rng: random.Random,
    board_size: int = BOARD_SIZE,
    snake: Optional[Snake] = None,
    direction: str = INITIAL_DIRECTION,
) -> SessionState:
    """Build a fresh RUNNING state with food on a random free cell."""
    snake = snake if snake is not None else Snake(INITIAL_SNAKE)
    for cell in snake:
        if not in_bounds(cell, board_size):
            raise ValueError(f"Snake cell out of bounds at {cell}.")
    if direction not in VALID_MOVES:
        raise ValueError(f"Invalid direction: {direction!r}")

    food = place_food(snake, rng, board_size)
    return SessionState(
        snake=snake,
        direction=direction,
        pending_direction=direction,
        food=food,
        board_size=board_size,
    )


def next_head(head: Cell, direction: str) -> Cell:
    dx, dy = DIRECTION_DELTAS[direction]
    return (head[0] + dx, head[1] + dy)


def _apply_direction(state: SessionState, direction: str) -> SessionState:
    if state.game_over or direction not in VALID_MOVES:
        return state
    # Gate against the committed direction so that several inputs between
    # two ticks can never add up to a reversal.
    if direction == OPPOSITE[state.direction]:
        return state
    if direction == state.pending_direction:
        return state
    return replace(state, pending_direction=direction)


def _apply_tick(state: SessionState, rng: random.Random) -> SessionState:
    if state.game_over:
        return state

    direction = state.pending_direction
    head = next_head(state.snake.head, direction)

    if not in_bounds(head, state.board_size):
        return replace(state, game_over=True, death_reason=DEATH_WALL)
    # Checked against the pre-move body, tail included
    if state.snake.occupies(head):
        return replace(state, game_over=True, death_reason=DEATH_SELF)

    ate = head == state.food
    snake = state.snake.advance(head, grow=ate)
    moved = replace(
        state,
        snake=snake,
        direction=direction,
        tick=state.tick + 1,
    )
    if not ate:
        return moved

    food = place_food(snake, rng, state.board_size)
    if food is None:
        return replace(
            moved,
            score=state.score + 1,
            food=None,
            game_over=True,
            won=True,
            death_reason=BOARD_FULL,
        )
    return replace(moved, score=state.score + 1, food=food)


def reduce(state: SessionState, message, rng: random.Random) -> SessionState:
    """
    Apply one message to the state and return the resulting state.

    Unknown message types leave the state untouched.
    """
    if isinstance(message, Tick):
        return _apply_tick(state, rng)
    if isinstance(message, SetDirection):
        return _apply_direction(state, message.direction)
    if isinstance(message, Restart):
        return initial_state(rng, board_size=state.board_size)

    logger.warning("Ignoring unknown message: %r", message)
    return state
