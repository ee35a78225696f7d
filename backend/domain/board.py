"""
Board helpers: bounds checks and food placement.
"""

import random
from typing import Iterable, List, Optional, Tuple

from .constants import BOARD_SIZE

Cell = Tuple[int, int]


def in_bounds(cell: Cell, board_size: int = BOARD_SIZE) -> bool:
    x, y = cell
    return 0 <= x < board_size and 0 <= y < board_size


def free_cells(occupied: Iterable[Cell], board_size: int = BOARD_SIZE) -> List[Cell]:
    """Return every board cell not in occupied, in row-major order."""
    taken = set(occupied)
    return [
        (x, y)
        for y in range(board_size)
        for x in range(board_size)
        if (x, y) not in taken
    ]


def place_food(
    occupied: Iterable[Cell],
    rng: random.Random,
    board_size: int = BOARD_SIZE,
) -> Optional[Cell]:
    """
    Pick a food cell uniformly at random from the free cells.

    Returns None when the board is full.
    """
    candidates = free_cells(occupied, board_size)
    if not candidates:
        return None
    return rng.choice(candidates)
