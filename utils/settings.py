from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from utils.env_loader import load_environments


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)
    connect_timeout_ms: int = 5000


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc


def get_settings() -> Settings:
    load_environments()
    origins = tuple(o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip())
    timeout_ms = _int_env("DB_CONNECT_TIMEOUT_MS", 5000)
    if timeout_ms <= 0:
        raise ValueError("DB_CONNECT_TIMEOUT_MS must be positive")
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 5000),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        cors_origins=origins or ("*",),
        connect_timeout_ms=timeout_ms,
    )
