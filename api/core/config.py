"""
Runtime settings read from the environment.

Every value has a local-development default except DATABASE_URL.
"""

from __future__ import annotations

import os

DEFAULT_SESSION_KEY = "dev-change-this-session-key"
DEFAULT_CORS_ORIGIN = "http://localhost:3000"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def session_key() -> str:
    # In production, set SESSION_KEY in environment.
    return _env_str("SESSION_KEY", DEFAULT_SESSION_KEY)


def session_cookie_name() -> str:
    return _env_str("SESSION_COOKIE_NAME", "starboard")


def session_max_age_days() -> int:
    return max(_env_int("SESSION_MAX_AGE_DAYS", 30), 1)


def session_cookie_secure() -> bool:
    return _env_bool("SESSION_COOKIE_SECURE", False)


def cors_origin() -> str:
    return _env_str("CORS_ORIGIN", DEFAULT_CORS_ORIGIN)


def db_pool_min_size() -> int:
    return _env_int("DB_POOL_MIN_SIZE", 1)


def db_pool_max_size() -> int:
    return _env_int("DB_POOL_MAX_SIZE", 5)


def db_command_timeout_s() -> int:
    return _env_int("DB_COMMAND_TIMEOUT_S", 30)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
