from __future__ import annotations

from typing import Any

from adapters.relational import RelationalAdapter


class MySQLAdapter(RelationalAdapter):
    engine = "mysql"
    default_port = 3306

    def _connect(self):
        import mysql.connector  # type: ignore
        from mysql.connector.constants import ClientFlag  # type: ignore

        params = self._db_params()
        return mysql.connector.connect(
            host=params["host"],
            port=params["port"],
            database=params["database"],
            user=params["user"],
            password=params["password"],
            connection_timeout=max(1, self.connect_timeout_ms // 1000),
            autocommit=True,
            # rowcount reports matched rows, not changed rows, for UPDATE
            client_flags=[ClientFlag.FOUND_ROWS],
        )

    def _inserted_id(self, cur) -> Any:
        return cur.lastrowid or None
