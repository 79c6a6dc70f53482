from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

# MySQL has no "no limit" keyword; this is the documented idiom for OFFSET alone.
MYSQL_MAX_LIMIT = 18446744073709551615


@dataclass(frozen=True)
class SQLCriteria:
    clause: str = ""
    params: Tuple[Any, ...] = ()

    def where_sql(self) -> str:
        return f" WHERE {self.clause}" if self.clause else ""


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class SQLDialect:
    engine: str
    placeholder: str
    identifier_quote: str

    def quote_identifier(self, name: str) -> str:
        name = str(name)
        if not name:
            raise ValueError("SQL identifier must not be empty")
        q = self.identifier_quote
        return f"{q}{name.replace(q, q + q)}{q}"

    def render_search_predicate(self, column: str) -> str:
        quoted = self.quote_identifier(column)
        if self.engine == "postgres":
            return f"CAST({quoted} AS TEXT) ILIKE {self.placeholder}"
        return f"LOWER(CAST({quoted} AS CHAR)) LIKE LOWER({self.placeholder})"

    def render_where(
        self,
        columns: Sequence[str],
        search: Optional[str],
        filters: Mapping[str, Any],
    ) -> SQLCriteria:
        clauses: List[str] = []
        params: List[Any] = []
        if search and columns:
            clauses.append("(" + " OR ".join(self.render_search_predicate(c) for c in columns) + ")")
            pattern = f"%{escape_like(search)}%"
            params.extend(pattern for _ in columns)
        for column, value in filters.items():
            if value is None:
                clauses.append(f"{self.quote_identifier(column)} IS NULL")
                continue
            clauses.append(f"{self.quote_identifier(column)} = {self.placeholder}")
            params.append(value)
        return SQLCriteria(clause=" AND ".join(clauses), params=tuple(params))

    def render_order_by(self, sort: Optional[str], order: str) -> str:
        if not sort:
            return ""
        direction = "DESC" if (order or "").upper() == "DESC" else "ASC"
        return f" ORDER BY {self.quote_identifier(sort)} {direction}"

    def render_pagination(self, limit: Optional[int], offset: int) -> Tuple[str, Tuple[int, ...]]:
        p = self.placeholder
        if limit is None:
            if not offset:
                return "", ()
            if self.engine == "mysql":
                return f" LIMIT {MYSQL_MAX_LIMIT} OFFSET {p}", (int(offset),)
            return f" OFFSET {p}", (int(offset),)
        return f" LIMIT {p} OFFSET {p}", (int(limit), int(offset))

    def render_insert(self, table: str, columns: Sequence[str]) -> str:
        target = self.quote_identifier(table)
        if columns:
            names = ", ".join(self.quote_identifier(c) for c in columns)
            values = ", ".join(self.placeholder for _ in columns)
            sql = f"INSERT INTO {target} ({names}) VALUES ({values})"
        elif self.engine == "postgres":
            sql = f"INSERT INTO {target} DEFAULT VALUES"
        else:
            sql = f"INSERT INTO {target} () VALUES ()"
        if self.engine == "postgres":
            sql += " RETURNING *"
        return sql

    def render_update(self, table: str, columns: Sequence[str]) -> str:
        assignments = ", ".join(f"{self.quote_identifier(c)} = {self.placeholder}" for c in columns)
        return f"UPDATE {self.quote_identifier(table)} SET {assignments} WHERE {self.quote_identifier('id')} = {self.placeholder}"

    def render_delete(self, table: str, id_count: int) -> str:
        marks = ", ".join(self.placeholder for _ in range(id_count))
        return f"DELETE FROM {self.quote_identifier(table)} WHERE {self.quote_identifier('id')} IN ({marks})"

    @property
    def current_schema_sql(self) -> str:
        return "current_schema()" if self.engine == "postgres" else "DATABASE()"

    def list_tables_sql(self) -> str:
        return f"""
            SELECT table_name AS table_name
            FROM information_schema.tables
            WHERE table_schema = {self.current_schema_sql}
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """

    def describe_sql(self) -> str:
        return f"""
            SELECT column_name AS column_name, data_type AS data_type
            FROM information_schema.columns
            WHERE table_schema = {self.current_schema_sql}
              AND table_name = {self.placeholder}
            ORDER BY ordinal_position
        """


def get_sql_dialect(db_engine: str) -> SQLDialect:
    engine = (db_engine or "").strip().lower()
    if engine == "postgres":
        return SQLDialect(engine="postgres", placeholder="%s", identifier_quote='"')
    if engine == "mysql":
        return SQLDialect(engine="mysql", placeholder="%s", identifier_quote="`")
    raise ValueError(f"No SQL dialect for db_engine: {db_engine}")
