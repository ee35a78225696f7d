"""
Domain entities for the Snake game engine.

This module contains the core game logic that is independent of
infrastructure concerns (timers, HTTP, threads).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, BOARD_SIZE, COMMANDS, KEY_BINDINGS,
    INITIAL_SNAKE, INITIAL_DIRECTION,
)
from .snake import Snake
from .game_state import GameState
from .messages import Tick, SetDirection, Restart
from .reducer import SessionState, initial_state, reduce

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'BOARD_SIZE', 'COMMANDS',
    'KEY_BINDINGS', 'INITIAL_SNAKE', 'INITIAL_DIRECTION',
    'Snake',
    'GameState',
    'Tick', 'SetDirection', 'Restart',
    'SessionState', 'initial_state', 'reduce',
]
