from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from adapters.operations import Operation, OperationKind


class AdapterError(RuntimeError):
    pass


class ConfigurationError(AdapterError):
    pass


class InvalidIdentifierError(ConfigurationError):
    pass


class InvalidRequestError(AdapterError):
    pass


class DatabaseAdapter(ABC):
    """Uniform contract every engine adapter implements.

    ``execute`` always returns a row-set. Operations that produce a scalar
    (inserted id, affected/deleted count, total) return a single-element
    row-set wrapping it.
    """

    engine: str = "unknown"
    default_port: int = 0

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        self.source_config = source_config or {}

    def _db_params(self) -> Dict[str, Any]:
        host = self.source_config.get("host")
        database = self.source_config.get("database")
        user = self.source_config.get("username")
        password = self.source_config.get("password") or ""
        port_raw = self.source_config.get("port") or self.default_port
        if not host:
            raise ConfigurationError("host is required")
        if not database:
            raise ConfigurationError("database is required")
        try:
            port = int(port_raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"port must be an integer, got: {port_raw!r}") from exc
        return {"host": host, "port": port, "database": database, "user": user, "password": password}

    def execute(self, operation: Operation) -> List[Dict[str, Any]]:
        handler = self._handlers().get(operation.kind)
        if handler is None:
            raise AdapterError(f"Unsupported {self.engine} operation: {operation.kind.value}")
        return handler(operation)

    def _handlers(self):
        return {
            OperationKind.FIND: self._find,
            OperationKind.INSERT: self._insert,
            OperationKind.UPDATE: self._update,
            OperationKind.DELETE: self._delete,
            OperationKind.COUNT: self._count,
            OperationKind.DESCRIBE: self._describe,
        }

    @abstractmethod
    def list_targets(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def build_criteria(self, columns: Sequence[str], search: Optional[str], filters: Mapping[str, Any]) -> Any:
        """Render search text and exact-match filters into engine-native criteria."""
        raise NotImplementedError

    @abstractmethod
    def _find(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _insert(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _update(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _delete(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _count(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def _describe(self, operation: Operation) -> List[Dict[str, Any]]:
        raise NotImplementedError


def strip_generated_id(values: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Drop placeholder primary keys the client sends for new rows."""
    row = dict(values)
    if "id" in row and (row["id"] == "new" or not row["id"]):
        del row["id"]
    for key in keys:
        row.pop(key, None)
    return row
