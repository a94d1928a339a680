from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


DEFAULT_DB_PATH = "./predios.sqlite"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Process settings, read once from the environment.

    An empty `api_key` disables the credential check.
    """

    db_path: str
    api_key: str
    host: str
    port: int
    db_timeout_s: float
    activity_default_limit: int
    cors: bool
    log_level: str
    log_json: bool

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=(os.getenv("PREDIOS_DB") or "").strip() or DEFAULT_DB_PATH,
            api_key=os.getenv("API_KEY", ""),
            host=(os.getenv("HOST") or "").strip() or "0.0.0.0",
            port=_env_int("PORT", 3000),
            db_timeout_s=max(0.0, _env_float("PREDIOS_DB_TIMEOUT_S", 5.0)),
            activity_default_limit=_env_int("PREDIOS_ACTIVITY_DEFAULT_LIMIT", 100),
            cors=_env_bool("PREDIOS_CORS", True),
            log_level=(os.getenv("PREDIOS_LOG_LEVEL") or "INFO").strip().upper(),
            log_json=_env_bool("PREDIOS_LOG_JSON", False),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Test helper to force env re-read."""

    get_settings.cache_clear()
