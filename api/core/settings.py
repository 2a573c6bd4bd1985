"""
Environment-backed settings.

Values are read on every call so tests (and long-running workers) can change
the environment without re-importing modules.
"""

from __future__ import annotations

import os

DEFAULT_LANGUAGE = "fr"


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def app_env() -> str:
    return env_str("APP_ENV", "development").lower()


def is_development() -> bool:
    return app_env() == "development"


def is_production() -> bool:
    return app_env() == "production"


def default_language() -> str:
    return env_str("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)


def allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if not raw:
        return ["*"]
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def rate_limit_enabled() -> bool:
    return env_bool("RATE_LIMIT_ENABLED", True)


def rate_limit_max_requests() -> int:
    return env_int("RATE_LIMIT_MAX_REQUESTS", 100)


def rate_limit_window_seconds() -> int:
    # 15 minutes.
    return env_int("RATE_LIMIT_WINDOW_SECONDS", 15 * 60)


def trust_proxy() -> bool:
    return env_bool("TRUST_PROXY", False)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def port() -> int:
    return env_int("PORT", 3000)
