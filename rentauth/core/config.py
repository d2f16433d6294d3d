"""
Configuration helpers for the account service.

Settings are read once from environment variables (database and Redis URLs,
token and session lifetimes, logging) so that services and repositories do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    redis_url: str
    password_reset_ttl: int
    session_ttl_seconds: int
    default_nick_name_prefix: str
    log_level: str
    log_json: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _positive_int(value: str, default: int) -> int:
        parsed = _int(value, default)
        return parsed if parsed > 0 else default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    return Settings(
        app_env=app_env,
        database_url=os.getenv("DATABASE_URL", ""),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        password_reset_ttl=_positive_int(os.getenv("PASSWORD_RESET_TTL", "900"), 900),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        default_nick_name_prefix=os.getenv("DEFAULT_NICK_NAME_PREFIX", "zfyh"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("LOG_JSON"), app_env == "prod"),
    )
