from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence


class OperationKind(str, Enum):
    FIND = "find"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    COUNT = "count"
    DESCRIBE = "describe"


@dataclass(frozen=True)
class QueryOptions:
    # criteria is whatever the active adapter's build_criteria produced
    criteria: Any = None
    sort: Optional[str] = None
    order: str = "ASC"
    limit: Optional[int] = None
    offset: int = 0


@dataclass(frozen=True)
class Operation:
    target: str
    kind: OperationKind
    values: Dict[str, Any] = field(default_factory=dict)
    record_id: Any = None
    ids: Sequence[Any] = ()
    options: QueryOptions = field(default_factory=QueryOptions)

    @classmethod
    def find(cls, target: str, options: Optional[QueryOptions] = None) -> "Operation":
        return cls(target=target, kind=OperationKind.FIND, options=options or QueryOptions())

    @classmethod
    def count(cls, target: str, criteria: Any = None) -> "Operation":
        return cls(target=target, kind=OperationKind.COUNT, options=QueryOptions(criteria=criteria))

    @classmethod
    def insert(cls, target: str, values: Dict[str, Any]) -> "Operation":
        return cls(target=target, kind=OperationKind.INSERT, values=dict(values))

    @classmethod
    def update(cls, target: str, record_id: Any, values: Dict[str, Any]) -> "Operation":
        return cls(target=target, kind=OperationKind.UPDATE, record_id=record_id, values=dict(values))

    @classmethod
    def delete(cls, target: str, ids: Sequence[Any]) -> "Operation":
        return cls(target=target, kind=OperationKind.DELETE, ids=tuple(ids))

    @classmethod
    def describe(cls, target: str) -> "Operation":
        return cls(target=target, kind=OperationKind.DESCRIBE)
