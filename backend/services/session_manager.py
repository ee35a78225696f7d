"""
Registry of live game sessions.

The HTTP layer never holds game state itself; it asks the manager for the
session belonging to a request. The manager also owns teardown: closing a
session stops its tick thread.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from domain.constants import TICK_INTERVAL_MS
from main import GameSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """No session is registered under the requested id."""


class SessionLimitError(RuntimeError):
    """The manager already holds max_sessions sessions."""


class SessionManager:
    def __init__(
        self,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        max_sessions: int = 100,
        session_factory: Optional[Callable[..., GameSession]] = None,
    ):
        self.tick_interval_ms = tick_interval_ms
        self.max_sessions = max_sessions
        self._session_factory = session_factory or GameSession
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def create_session(self, start: bool = True) -> GameSession:
        """Create, register and (by default) start a new session."""
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise SessionLimitError(
                    f"Session limit reached ({self.max_sessions}); try again later."
                )
            session = self._session_factory(tick_interval_ms=self.tick_interval_ms)
            self._sessions[session.session_id] = session

        if start:
            session.start()
        logger.info("Created session %s (%s active)", session.session_id, len(self))
        return session

    def get_session(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close_session(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.close()

    def close_all(self) -> int:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()
        if sessions:
            logger.info("Closed %s sessions", len(sessions))
        return len(sessions)

    def delete_stale_sessions(self, max_idle_seconds: float, now: Optional[float] = None) -> List[str]:
        """Close and forget sessions that have not seen a message for too long."""
        now = time.time() if now is None else now
        threshold = now - max_idle_seconds

        with self._lock:
            stale_ids = [
                sid for sid, session in self._sessions.items()
                if session.last_activity < threshold
            ]
            stale = [self._sessions.pop(sid) for sid in stale_ids]

        for session in stale:
            session.close()

        if stale_ids:
            logger.warning(
                "Deleted %s stale sessions idle for more than %ss",
                len(stale_ids), max_idle_seconds,
            )
        return stale_ids
