"""
Game constants for the browser Snake game.
"""

# Board
BOARD_SIZE = 20

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Unit deltas; y grows downward so row 0 is the top of the rendered grid
DIRECTION_DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITE = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Logical input commands produced by the input collaborator
MOVE_UP = "MOVE_UP"
MOVE_DOWN = "MOVE_DOWN"
MOVE_LEFT = "MOVE_LEFT"
MOVE_RIGHT = "MOVE_RIGHT"

COMMANDS = {
    MOVE_UP: UP,
    MOVE_DOWN: DOWN,
    MOVE_LEFT: LEFT,
    MOVE_RIGHT: RIGHT,
}

# Raw browser key names -> logical commands
KEY_BINDINGS = {
    "ArrowUp": MOVE_UP,
    "ArrowDown": MOVE_DOWN,
    "ArrowLeft": MOVE_LEFT,
    "ArrowRight": MOVE_RIGHT,
    "w": MOVE_UP,
    "s": MOVE_DOWN,
    "a": MOVE_LEFT,
    "d": MOVE_RIGHT,
}

# Starting layout
INITIAL_SNAKE = ((8, 10), (7, 10), (6, 10))
INITIAL_DIRECTION = RIGHT

# Tick interval bounds in milliseconds
TICK_INTERVAL_MS = 100
MIN_TICK_INTERVAL_MS = 100
MAX_TICK_INTERVAL_MS = 120

# Death reasons
DEATH_WALL = "wall"
DEATH_SELF = "self"
BOARD_FULL = "board_full"
