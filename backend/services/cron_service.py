"""
Lightweight cron-style service for scheduled maintenance tasks.

Currently includes:
 - Stale session cleanup every N minutes (default: 5), closing sessions
   whose browser has stopped polling for SESSION_IDLE_MINUTES (default: 30)
"""

import logging
import threading

import schedule

import config
from services.session_manager import SessionManager

logger = logging.getLogger(__name__)

SCHEDULER_LOOP_SLEEP_SECONDS = 5


def delete_stale_sessions(manager: SessionManager) -> None:
    """Close sessions that have been idle longer than SESSION_IDLE_MINUTES."""
    idle_seconds = config.SESSION_IDLE_MINUTES * 60
    try:
        stale_ids = manager.delete_stale_sessions(idle_seconds)
    except Exception:
        logger.exception("Failed to delete stale sessions")
        return

    if not stale_ids:
        logger.info(
            "No stale sessions found (idle cutoff: %s minutes, active: %s)",
            config.SESSION_IDLE_MINUTES,
            len(manager),
        )


def _validated_cleanup_interval() -> int:
    """Ensure we always use a positive interval for cleanup."""
    if config.CLEANUP_INTERVAL_MINUTES <= 0:
        logger.warning(
            "CLEANUP_INTERVAL_MINUTES=%s is invalid; defaulting to 5.",
            config.CLEANUP_INTERVAL_MINUTES,
        )
        return 5
    return config.CLEANUP_INTERVAL_MINUTES


def build_scheduler(manager: SessionManager) -> schedule.Scheduler:
    """Register the maintenance jobs on a private scheduler."""
    scheduler = schedule.Scheduler()
    interval = _validated_cleanup_interval()
    scheduler.every(interval).minutes.do(delete_stale_sessions, manager)
    logger.info(
        "Scheduled stale session cleanup every %s minutes; idle cutoff %s minutes.",
        interval,
        config.SESSION_IDLE_MINUTES,
    )
    return scheduler


def run_scheduler(manager: SessionManager, stop_event: threading.Event) -> None:
    """Run the maintenance loop until stop_event is set."""
    scheduler = build_scheduler(manager)
    while not stop_event.is_set():
        scheduler.run_pending()
        stop_event.wait(SCHEDULER_LOOP_SLEEP_SECONDS)
    scheduler.clear()
    logger.info("Cron service stopped.")


def start_cleanup_thread(manager: SessionManager) -> threading.Event:
    """Start run_scheduler on a daemon thread; set the returned event to stop it."""
    stop_event = threading.Event()
    thread = threading.Thread(
        target=run_scheduler,
        args=(manager, stop_event),
        name="session-cleanup",
        daemon=True,
    )
    thread.start()
    return stop_event
