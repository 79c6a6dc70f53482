from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

MASK = "[masked]"


@dataclass(frozen=True)
class ConnectionConfig:
    host: str
    port: int
    username: str
    password: str = field(repr=False)
    database: str
    engine_type: str

    def as_source_config(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
            "database": self.database,
        }

    def redacted(self) -> Dict[str, Any]:
        payload = self.as_source_config()
        payload["password"] = MASK if self.password else ""
        payload["engine_type"] = self.engine_type
        return payload
