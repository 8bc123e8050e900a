from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_DATABASE_URL_ENV = "ENV_SERVER_DATABASE_URL"
_DATABASE_ECHO_ENV = "ENV_SERVER_DB_ECHO"
_SEED_VOCABULARY_ENV = "ENV_SERVER_SEED_VOCABULARY"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    database_echo: bool
    seed_vocabulary: bool
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=_read_str_env(
            _DATABASE_URL_ENV, "sqlite+aiosqlite:///./tmp/env_server.db"
        ),
        database_echo=_read_bool_env(_DATABASE_ECHO_ENV, False),
        seed_vocabulary=_read_bool_env(_SEED_VOCABULARY_ENV, True),
        log_level=_read_log_level("INFO"),
    )
