from __future__ import annotations

from typing import Any

from adapters.relational import RelationalAdapter, rows_from_cursor


class PostgresAdapter(RelationalAdapter):
    engine = "postgres"
    default_port = 5432

    def _connect(self):
        import psycopg  # type: ignore

        params = self._db_params()
        return psycopg.connect(
            host=params["host"],
            port=params["port"],
            dbname=params["database"],
            user=params["user"],
            password=params["password"],
            connect_timeout=max(1, self.connect_timeout_ms // 1000),
            autocommit=True,
        )

    def _inserted_id(self, cur) -> Any:
        # INSERT ... RETURNING * hands back the stored row
        rows = rows_from_cursor(cur)
        if not rows:
            return None
        return rows[0].get("id")
