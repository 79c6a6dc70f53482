from __future__ import annotations

from typing import Any, Dict, Optional

from adapters.base import ConfigurationError, DatabaseAdapter
from utils.settings import get_settings

SUPPORTED_ENGINES = ("mysql", "postgres", "mongodb")


def normalize_engine(db_engine: Optional[str]) -> str:
    engine = (db_engine or "").strip().lower()
    if engine not in SUPPORTED_ENGINES:
        raise ConfigurationError(
            f"Unsupported database type: {db_engine!r}. Expected one of: {', '.join(SUPPORTED_ENGINES)}"
        )
    return engine


def get_adapter(
    db_engine: Optional[str],
    source_config: Optional[Dict[str, Any]] = None,
    connect_timeout_ms: Optional[int] = None,
) -> DatabaseAdapter:
    engine = normalize_engine(db_engine)
    timeout = connect_timeout_ms or get_settings().connect_timeout_ms
    # drivers are only imported for the engine actually requested
    if engine == "postgres":
        from adapters.postgres import PostgresAdapter

        return PostgresAdapter(source_config=source_config, connect_timeout_ms=timeout)
    if engine == "mysql":
        from adapters.mysql import MySQLAdapter

        return MySQLAdapter(source_config=source_config, connect_timeout_ms=timeout)
    from adapters.mongodb import MongoDBAdapter

    return MongoDBAdapter(source_config=source_config, connect_timeout_ms=timeout)
