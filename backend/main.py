import argparse
import logging
import random
import threading
import time
import uuid
from typing import Optional

from domain.constants import COMMANDS, KEY_BINDINGS, TICK_INTERVAL_MS
from domain.game_state import GameState
from domain.messages import Restart, SetDirection, Tick
from domain.reducer import SessionState, initial_state, reduce
from services.tick_scheduler import TickScheduler

logger = logging.getLogger(__name__)


class SessionClosedError(RuntimeError):
    """Raised when a message is sent to a session that has been torn down."""


class GameSession:
    """
    Owns one game of Snake:
      - State (snake, directions, food, score, game over flag)
      - The tick scheduler that advances it
      - A lock so ticks and input are applied one at a time

    Call start() to begin ticking and close() (or use the session as a
    context manager) to release the scheduler thread.
    """
    def __init__(
        self,
        session_id: Optional[str] = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        rng: Optional[random.Random] = None,
        state: Optional[SessionState] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        # Serializes start/restart/close; the tick thread never takes it
        self._lifecycle_lock = threading.Lock()
        self.state = state if state is not None else initial_state(self._rng)
        self.closed = False
        self.created_at = time.time()
        self.last_activity = self.created_at
        self.scheduler = TickScheduler(
            self._on_tick,
            interval_ms=tick_interval_ms,
            name=f"ticks-{self.session_id[:8]}",
        )

    # -------------------------------
    # Lifecycle
    # -------------------------------

    def start(self) -> "GameSession":
        with self._lifecycle_lock:
            self._ensure_open()
            self.scheduler.start()
        logger.info("Session %s started (every %sms)", self.session_id, self.scheduler.interval_ms)
        return self

    def close(self) -> None:
        """Stop ticking and refuse further messages. Safe to call twice."""
        with self._lifecycle_lock:
            with self._lock:
                if self.closed:
                    return
                self.closed = True
            # Outside the state lock: the tick thread may be waiting on it
            self.scheduler.stop()
        logger.info(
            "Session %s closed (score=%s, ticks=%s)",
            self.session_id, self.state.score, self.state.tick,
        )

    def __enter__(self) -> "GameSession":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------
    # Messages
    # -------------------------------

    def dispatch(self, message) -> SessionState:
        """Apply one message to the session state and return the new state."""
        with self._lock:
            self._ensure_open()
            previous = self.state
            self.state = reduce(previous, message, self._rng)
            # Only player-driven messages count as activity
            if not isinstance(message, Tick):
                self.last_activity = time.time()

            if self.state.game_over and not previous.game_over:
                if self.state.won:
                    logger.info(
                        "Session %s won: snake fills the board (score=%s)",
                        self.session_id, self.state.score,
                    )
                else:
                    logger.info(
                        "Session %s game over: %s collision at tick %s (score=%s)",
                        self.session_id, self.state.death_reason,
                        self.state.tick, self.state.score,
                    )
            return self.state

    def tick(self) -> SessionState:
        return self.dispatch(Tick())

    def set_direction(self, direction: str) -> bool:
        """
        Request a new direction. Returns True when it is (or already was) the
        pending direction, False when it was ignored.
        """
        state = self.dispatch(SetDirection(direction))
        return not state.game_over and state.pending_direction == direction

    def handle_command(self, command: str) -> bool:
        """Apply a logical MOVE_* command; unknown commands are ignored."""
        direction = COMMANDS.get(command) if isinstance(command, str) else None
        if direction is None:
            logger.debug("Ignoring unknown command %r", command)
            self._touch()
            return False
        return self.set_direction(direction)

    def handle_key(self, key: str) -> bool:
        """Translate a raw key name (e.g. 'ArrowUp') and apply it."""
        command = None
        if isinstance(key, str):
            command = KEY_BINDINGS.get(key) or KEY_BINDINGS.get(key.lower())
        if command is None:
            logger.debug("Ignoring unbound key %r", key)
            self._touch()
            return False
        return self.handle_command(command)

    def restart(self) -> SessionState:
        """Reset the game and re-arm the scheduler."""
        with self._lifecycle_lock:
            state = self.dispatch(Restart())
            self.scheduler.restart()
        logger.info("Session %s restarted", self.session_id)
        return state

    def snapshot(self, touch: bool = True) -> GameState:
        with self._lock:
            self._ensure_open()
            if touch:
                self.last_activity = time.time()
            return GameState.from_session_state(self.state, session_id=self.session_id)

    # -------------------------------
    # Internals
    # -------------------------------

    def _on_tick(self) -> bool:
        with self._lock:
            if self.closed:
                return False
            return not self.tick().game_over

    def _touch(self) -> None:
        with self._lock:
            self._ensure_open()
            self.last_activity = time.time()

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")

    def __repr__(self):
        return (
            f"<GameSession id={self.session_id}, score={self.state.score}, "
            f"game_over={self.state.game_over}>"
        )


# -------------------------------
# Headless run (debug aid)
# -------------------------------

def run_headless(ticks: int, seed: Optional[int] = None) -> GameState:
    """
    Advance a session by hand for `ticks` steps without starting its timer.
    """
    session = GameSession(rng=random.Random(seed))
    try:
        for _ in range(ticks):
            if session.tick().game_over:
                break
        return session.snapshot()
    finally:
        session.close()


# -------------------------------
# Main Entry Point
# -------------------------------

def main():
    import config

    parser = argparse.ArgumentParser(description="Serve the browser Snake game.")
    parser.add_argument("--host", type=str, default=config.HOST,
                        help="Interface to bind the HTTP server to")
    parser.add_argument("--port", type=int, default=config.PORT,
                        help="Port to bind the HTTP server to")
    parser.add_argument("--tick-ms", type=int, default=config.TICK_INTERVAL_MS,
                        help="Tick interval in milliseconds (100-120)")
    parser.add_argument("--debug", action="store_true", default=config.FLASK_DEBUG,
                        help="Run Flask in debug mode")
    parser.add_argument("--print-board", type=int, metavar="TICKS", default=None,
                        help="Run a headless session for TICKS ticks, print the board and exit")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for --print-board")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    if args.print_board is not None:
        snapshot = run_headless(args.print_board, seed=args.seed)
        print(snapshot.print_board())
        print(f"\nScore: {snapshot.score}  Game over: {snapshot.game_over}")
        return

    from app import create_app
    from services.cron_service import start_cleanup_thread
    from services.session_manager import SessionManager

    manager = SessionManager(
        tick_interval_ms=config.clamp_tick_interval(args.tick_ms),
        max_sessions=config.MAX_SESSIONS,
    )
    stop_cleanup = start_cleanup_thread(manager)
    app = create_app(manager)
    try:
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True, use_reloader=False)
    finally:
        stop_cleanup.set()
        manager.close_all()


if __name__ == "__main__":
    main()
