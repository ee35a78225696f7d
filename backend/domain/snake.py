"""
Snake entity for the game engine.
"""

from typing import Iterable, Iterator, Tuple

Cell = Tuple[int, int]


class Snake:
    """
    Immutable snake body.

    Attributes:
        positions: tuple of (x, y) from head at index 0 to tail at the end
    """

    __slots__ = ("positions",)

    def __init__(self, positions: Iterable[Cell]):
        positions = tuple((int(x), int(y)) for x, y in positions)
        if not positions:
            raise ValueError("A snake needs at least one cell.")
        if len(set(positions)) != len(positions):
            raise ValueError(f"Snake cells must be unique: {positions}")
        self.positions = positions

    @property
    def head(self) -> Cell:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Cell:
        """Return the tail position (last element)."""
        return self.positions[-1]

    def occupies(self, cell: Cell) -> bool:
        return cell in self.positions

    def advance(self, new_head: Cell, grow: bool = False) -> "Snake":
        """
        Return the snake after moving its head to new_head.

        The tail is dropped unless grow is True, in which case the length
        increases by one.
        """
        body = self.positions if grow else self.positions[:-1]
        return Snake((new_head,) + body)

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.positions)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snake):
            return NotImplemented
        return self.positions == other.positions

    def __hash__(self) -> int:
        return hash(self.positions)

    def __repr__(self):
        return f"<Snake head={self.head}, length={len(self)}>"
