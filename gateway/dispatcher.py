from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from adapters import AdapterError, Operation
from gateway.exporter import EXPORT_FORMATS, render_export
from gateway.normalizer import QueryValidationError, build_query_options, parse_list_request, sample_columns
from gateway.registry import ConnectionRegistry

LOG = logging.getLogger(__name__)


class Dispatcher:
    """Runs table-scoped requests against whichever adapter is active."""

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def get_columns(self, table: str) -> List[str]:
        with self.registry.lease() as handle:
            described = handle.adapter.execute(Operation.describe(table))
            if described:
                return [row["column_name"] for row in described]
            return sample_columns(handle.adapter, table)

    def list_rows(self, table: str, params: Mapping[str, Optional[str]]) -> Dict[str, Any]:
        with self.registry.lease() as handle:
            adapter = handle.adapter
            request = parse_list_request(params)
            columns = sample_columns(adapter, table)
            options = build_query_options(adapter, table, request, columns)
            rows = adapter.execute(Operation.find(table, options))
            counted = adapter.execute(Operation.count(table, options.criteria))
            total = counted[0]["total"] if counted else 0
        return {"data": rows, "total": total}

    def insert_row(self, table: str, values: Mapping[str, Any]) -> Any:
        with self.registry.lease() as handle:
            result = handle.adapter.execute(Operation.insert(table, dict(values)))
        inserted_id = result[0].get("insertedId") if result else None
        LOG.info("Inserted row into %s (id=%s)", table, inserted_id)
        return inserted_id

    def update_row(self, table: str, record_id: Any, values: Mapping[str, Any]) -> int:
        with self.registry.lease() as handle:
            if not values:
                raise QueryValidationError("No fields provided for update")
            result = handle.adapter.execute(Operation.update(table, record_id, dict(values)))
        affected = result[0].get("affectedRows", 0) if result else 0
        if not affected:
            raise AdapterError(f"Update failed - no rows matched id {record_id!r}")
        LOG.info("Updated row %s in %s (matched=%s)", record_id, table, affected)
        return affected

    def delete_rows(self, table: str, ids: Optional[Sequence[Any]]) -> int:
        with self.registry.lease() as handle:
            if not ids:
                raise QueryValidationError("No IDs provided for deletion")
            result = handle.adapter.execute(Operation.delete(table, list(ids)))
        deleted = result[0].get("deletedCount", 0) if result else 0
        LOG.info("Deleted %s row(s) from %s", deleted, table)
        return deleted

    def export_table(self, table: str, export_format: Optional[str]) -> Tuple[str, str]:
        """Return (body, media type) for a full-table download."""
        with self.registry.lease() as handle:
            fmt = (export_format or "json").strip().lower()
            if fmt not in EXPORT_FORMATS:
                raise QueryValidationError(f"format must be one of {sorted(EXPORT_FORMATS)}, got: {export_format!r}")
            rows = handle.adapter.execute(Operation.find(table))
        LOG.info("Exporting %d row(s) from %s as %s", len(rows), table, fmt)
        return render_export(rows, fmt), EXPORT_FORMATS[fmt]
