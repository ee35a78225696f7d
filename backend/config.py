"""
Runtime configuration loaded from the environment (and a local .env file).
"""

import logging
import os
from typing import List

from dotenv import load_dotenv

from domain.constants import MAX_TICK_INTERVAL_MS, MIN_TICK_INTERVAL_MS, TICK_INTERVAL_MS as DEFAULT_TICK_INTERVAL_MS

load_dotenv()

logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; defaulting to %s.", name, raw, default)
        return default


def clamp_tick_interval(interval_ms: int) -> int:
    """Keep the tick interval inside the supported 100-120 ms window."""
    clamped = max(MIN_TICK_INTERVAL_MS, min(MAX_TICK_INTERVAL_MS, int(interval_ms)))
    if clamped != interval_ms:
        logger.warning(
            "Tick interval %sms is outside %s-%sms; using %sms.",
            interval_ms, MIN_TICK_INTERVAL_MS, MAX_TICK_INTERVAL_MS, clamped,
        )
    return clamped


def _origins_from_env() -> List[str]:
    allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
    if allowed_origins_env:
        return [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
    # sensible defaults for local dev
    return [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

TICK_INTERVAL_MS = clamp_tick_interval(_int_from_env("TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS))

HOST = os.getenv("HOST", "127.0.0.1")
PORT = _int_from_env("PORT", 5000)
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "").lower() in ("1", "true", "yes")
CORS_ALLOWED_ORIGINS = _origins_from_env()

MAX_SESSIONS = _int_from_env("MAX_SESSIONS", 100)
SESSION_IDLE_MINUTES = _int_from_env("SESSION_IDLE_MINUTES", 30)
CLEANUP_INTERVAL_MINUTES = _int_from_env("CLEANUP_INTERVAL_MINUTES", 5)
