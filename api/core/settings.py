"""
Environment-driven settings.

Values are read on every call so tests (and operators) can change the
environment without restarting the process. Missing optional secrets return
an empty string; callers decide whether that is a configuration error.
"""

from __future__ import annotations

import os

DEFAULT_PORT = 3000
DEFAULT_ALLOWED_ORIGINS = ["*"]


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper() or "INFO"


def database_url() -> str:
    return _env_str("DATABASE_URL")


def admin_key() -> str:
    return _env_str("ADMIN_KEY")


def allowed_origins() -> list[str]:
    raw = _env_str("ALLOWED_ORIGIN")
    if not raw:
        return list(DEFAULT_ALLOWED_ORIGINS)
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(DEFAULT_ALLOWED_ORIGINS)


def instagram_client_id() -> str:
    return _env_str("IG_CLIENT_ID")


def instagram_client_secret() -> str:
    return _env_str("IG_CLIENT_SECRET")


def instagram_redirect_uri() -> str:
    return _env_str("REDIRECT_URI")


def instagram_timeout_s() -> float:
    return _env_float("INSTAGRAM_TIMEOUT_S", 15.0)


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return _env_str("JWT_SECRET", "dev-change-this-secret") or "dev-change-this-secret"


def jwt_algorithm() -> str:
    return _env_str("JWT_ALG", "HS256") or "HS256"


def access_token_expire_minutes() -> int:
    return _env_int("ACCESS_TOKEN_EXPIRE_MIN", 60)


def refresh_token_expire_days() -> int:
    return _env_int("REFRESH_TOKEN_EXPIRE_DAYS", 30)


def session_backend() -> str:
    return _env_str("SESSION_BACKEND", "memory").lower() or "memory"


def session_cookie_secure() -> bool:
    return _env_bool("SESSION_COOKIE_SECURE", False)
