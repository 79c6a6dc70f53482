"""Turns listing query-string input into adapter query options.

The parsing and validation rules are the same for every engine; only the final
criteria rendering is delegated to the active adapter.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from adapters import DatabaseAdapter, Operation, QueryOptions

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
SORT_ORDERS = ("ASC", "DESC")


class QueryValidationError(ValueError):
    pass


@dataclass(frozen=True)
class ListRequest:
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    sort: Optional[str] = None
    order: str = "ASC"
    search: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)


def parse_non_negative_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or str(raw).strip() == "":
        return default
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise QueryValidationError(f"{name} must be a non-negative integer, got: {raw!r}")
    return int(text)


def parse_order(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        return "ASC"
    order = raw.strip().upper()
    if order not in SORT_ORDERS:
        raise QueryValidationError(f"order must be ASC or DESC, got: {raw!r}")
    return order


def parse_filters(raw: Optional[str]) -> Dict[str, Any]:
    if raw is None or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise QueryValidationError(f"filters must be a JSON object: {exc.msg}") from exc
    if not isinstance(parsed, dict):
        raise QueryValidationError("filters must be a JSON object mapping column to value")
    return parsed


def parse_list_request(params: Mapping[str, Optional[str]]) -> ListRequest:
    offset_raw = params.get("offset")
    if offset_raw is None:
        offset_raw = params.get("skip")
    sort = (params.get("sort") or "").strip() or None
    search = params.get("search") or None
    return ListRequest(
        limit=parse_non_negative_int("limit", params.get("limit"), DEFAULT_LIMIT),
        offset=parse_non_negative_int("offset", offset_raw, DEFAULT_OFFSET),
        sort=sort,
        order=parse_order(params.get("order")),
        search=search,
        filters=parse_filters(params.get("filters")),
    )


def sample_columns(adapter: DatabaseAdapter, table: str) -> List[str]:
    """Columns of one sampled row; empty when the target has no rows."""
    rows = adapter.execute(Operation.find(table, QueryOptions(limit=1)))
    return list(rows[0].keys()) if rows else []


def validate_filters(table: str, filters: Mapping[str, Any], columns: List[str]) -> None:
    for column in filters:
        if column not in columns:
            raise QueryValidationError(f'Column "{column}" does not exist in table "{table}"')


def build_query_options(adapter: DatabaseAdapter, table: str, request: ListRequest, columns: List[str]) -> QueryOptions:
    validate_filters(table, request.filters, columns)
    criteria = adapter.build_criteria(columns, request.search, request.filters)
    sort = request.sort if request.sort in columns else None
    return QueryOptions(
        criteria=criteria,
        sort=sort,
        order=request.order,
        limit=request.limit,
        offset=request.offset,
    )
