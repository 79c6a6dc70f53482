from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from adapters.base import ConfigurationError, DatabaseAdapter, InvalidRequestError, strip_generated_id
from adapters.operations import Operation
from adapters.sql_renderer import SQLCriteria, SQLDialect, get_sql_dialect

LOG = logging.getLogger(__name__)


def rows_from_cursor(cur) -> List[Dict[str, Any]]:
    if cur.description is None:
        return []
    columns = [desc[0] for desc in cur.description]
    return [{columns[i]: row[i] for i in range(len(columns))} for row in cur.fetchall()]


class RelationalAdapter(DatabaseAdapter):
    """DB-API backed adapter shared by the SQL engines.

    Holds one connection in autocommit mode. Cursor use is serialized with a
    lock because route handlers share the adapter across worker threads.
    """

    def __init__(self, source_config: Optional[Dict[str, Any]] = None, connect_timeout_ms: int = 5000):
        super().__init__(source_config)
        self.dialect: SQLDialect = get_sql_dialect(self.engine)
        self.connect_timeout_ms = connect_timeout_ms
        self._lock = threading.Lock()
        self._conn = self._connect()

    def _db_params(self) -> Dict[str, Any]:
        params = super()._db_params()
        if not params["user"]:
            raise ConfigurationError("username is required")
        return params

    def _connect(self):
        raise NotImplementedError

    def _inserted_id(self, cur) -> Any:
        raise NotImplementedError

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        with self._lock:
            cur = self._conn.cursor()
            try:
                yield cur
            finally:
                cur.close()

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        LOG.debug("%s query: %s", self.engine, sql)
        with self._cursor() as cur:
            cur.execute(sql, tuple(params) or None)
            return rows_from_cursor(cur)

    def _write(self, sql: str, params: Sequence[Any]) -> int:
        LOG.debug("%s statement: %s", self.engine, sql)
        with self._cursor() as cur:
            cur.execute(sql, tuple(params))
            return max(int(cur.rowcount or 0), 0)

    def build_criteria(self, columns: Sequence[str], search: Optional[str], filters: Mapping[str, Any]) -> SQLCriteria:
        return self.dialect.render_where(columns, search, filters)

    def list_targets(self) -> List[str]:
        return [row["table_name"] for row in self._query(self.dialect.list_tables_sql())]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        LOG.info("%s connection closed", self.engine)

    def _find(self, operation: Operation) -> List[Dict[str, Any]]:
        opts = operation.options
        criteria = opts.criteria or SQLCriteria()
        sql = f"SELECT * FROM {self.dialect.quote_identifier(operation.target)}{criteria.where_sql()}"
        sql += self.dialect.render_order_by(opts.sort, opts.order)
        page_sql, page_params = self.dialect.render_pagination(opts.limit, opts.offset)
        return self._query(sql + page_sql, criteria.params + page_params)

    def _insert(self, operation: Operation) -> List[Dict[str, Any]]:
        values = strip_generated_id(operation.values)
        columns = list(values)
        sql = self.dialect.render_insert(operation.target, columns)
        LOG.debug("%s statement: %s", self.engine, sql)
        with self._cursor() as cur:
            cur.execute(sql, tuple(values[c] for c in columns))
            inserted_id = self._inserted_id(cur)
        return [{"insertedId": inserted_id}]

    def _update(self, operation: Operation) -> List[Dict[str, Any]]:
        if not operation.values:
            raise InvalidRequestError("No fields provided for update")
        columns = list(operation.values)
        sql = self.dialect.render_update(operation.target, columns)
        params = [operation.values[c] for c in columns] + [operation.record_id]
        return [{"affectedRows": self._write(sql, params)}]

    def _delete(self, operation: Operation) -> List[Dict[str, Any]]:
        if not operation.ids:
            return [{"deletedCount": 0}]
        sql = self.dialect.render_delete(operation.target, len(operation.ids))
        return [{"deletedCount": self._write(sql, operation.ids)}]

    def _count(self, operation: Operation) -> List[Dict[str, Any]]:
        criteria = operation.options.criteria or SQLCriteria()
        sql = f"SELECT COUNT(*) AS total FROM {self.dialect.quote_identifier(operation.target)}{criteria.where_sql()}"
        rows = self._query(sql, criteria.params)
        total = rows[0]["total"] if rows else 0
        return [{"total": int(total or 0)}]

    def _describe(self, operation: Operation) -> List[Dict[str, Any]]:
        rows = self._query(self.dialect.describe_sql(), (operation.target,))
        return [
            {"column_name": row["column_name"], "data_type": row["data_type"]}
            for row in rows
        ]
