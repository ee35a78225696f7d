"""
Fixed-interval tick source for a game session.

Each TickScheduler owns a private schedule.Scheduler and a daemon thread that
polls it. The callback runs once per interval; when it returns False the job
is cancelled and the thread winds down, so a finished game stops ticking on
its own. stop() and restart() are safe to call from any thread.
"""

import logging
import threading
from typing import Callable, Optional

import schedule

from domain.constants import TICK_INTERVAL_MS

logger = logging.getLogger(__name__)

# How often the worker thread checks for due jobs
POLL_INTERVAL_SECONDS = 0.005


class TickScheduler:
    """
    Calls `callback` every `interval_ms` milliseconds until it returns False
    or the scheduler is stopped.
    """

    def __init__(
        self,
        callback: Callable[[], bool],
        interval_ms: int = TICK_INTERVAL_MS,
        name: str = "tick-scheduler",
    ):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.callback = callback
        self.interval_ms = interval_ms
        self.name = name
        self.fired = 0

        self._scheduler = schedule.Scheduler()
        self._job: Optional[schedule.Job] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        """Arm the job and start the worker thread. No-op when already running."""
        with self._lock:
            if self.is_running:
                return
            self._join_previous()
            self._stop_event = threading.Event()
            self._scheduler.clear()
            self._job = self._scheduler.every(self.interval_ms / 1000.0).seconds.do(self._fire)
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name=self.name,
                daemon=True,
            )
            self._thread.start()
            logger.debug("%s started (every %sms)", self.name, self.interval_ms)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Cancel the job and wait for the worker thread to exit."""
        with self._lock:
            self._stop_event.set()
            self._scheduler.clear()
            self._job = None
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("%s stopped after %s ticks", self.name, self.fired)

    def restart(self) -> None:
        self.stop()
        self.start()

    def _join_previous(self) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(1.0)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self._scheduler.run_pending()
            stop_event.wait(POLL_INTERVAL_SECONDS)

    def _fire(self):
        self.fired += 1
        try:
            keep_going = self.callback()
        except Exception:
            logger.exception("%s callback failed; stopping", self.name)
            keep_going = False

        if keep_going is False:
            self._stop_event.set()
            return schedule.CancelJob
        return None
