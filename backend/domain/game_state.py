"""
GameState entity - a read-only snapshot of a session at a point in time.
"""

from typing import Any, Dict, List, Optional, Tuple


class GameState:
    """
    A snapshot of the game handed to the renderer.

    Attributes:
        snake: list of (x, y), head first
        food: (x, y) of the food, or None once the board is full
        score: apples eaten
        game_over: whether the session reached its terminal state
        won: whether the snake filled the board
        direction: committed direction
        death_reason: 'wall', 'self', 'board_full' or None
        tick: completed ticks since the last (re)start
        board_size: width and height of the board
        session_id: owning session, if any
    """

    def __init__(
        self,
        snake: List[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        score: int,
        game_over: bool,
        board_size: int,
        direction: str,
        won: bool = False,
        death_reason: Optional[str] = None,
        tick: int = 0,
        session_id: Optional[str] = None,
    ):
        self.snake = snake
        self.food = food
        self.score = score
        self.game_over = game_over
        self.board_size = board_size
        self.direction = direction
        self.won = won
        self.death_reason = death_reason
        self.tick = tick
        self.session_id = session_id

    @classmethod
    def from_session_state(cls, state, session_id: Optional[str] = None) -> "GameState":
        return cls(
            snake=list(state.snake.positions),
            food=state.food,
            score=state.score,
            game_over=state.game_over,
            board_size=state.board_size,
            direction=state.direction,
            won=state.won,
            death_reason=state.death_reason,
            tick=state.tick,
            session_id=session_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form; cells become [x, y] lists."""
        return {
            "session_id": self.session_id,
            "snake": [list(cell) for cell in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "score": self.score,
            "game_over": self.game_over,
            "won": self.won,
            "direction": self.direction,
            "death_reason": self.death_reason,
            "tick": self.tick,
            "board_size": self.board_size,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        S = snake body
        Row 0 is printed first, matching the browser grid.
        """
        board = [['.' for _ in range(self.board_size)] for _ in range(self.board_size)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if pos_idx == 0 else 'S'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.board_size)]
        # Single digit labels keep the columns aligned
        result.append("   " + " ".join(str(i % 10) for i in range(self.board_size)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, food={self.food}, "
            f"length={len(self.snake)}, score={self.score}, game_over={self.game_over}>"
        )
