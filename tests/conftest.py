from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from adapters.base import AdapterError, DatabaseAdapter, strip_generated_id
from gateway.dispatcher import Dispatcher
from gateway.registry import ConnectionRegistry


class InMemoryAdapter(DatabaseAdapter):
    """Adapter over python lists; criteria are row predicates."""

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]], engine: str = "postgres"):
        super().__init__({})
        self.engine = engine
        self.tables = {name: [dict(row) for row in rows] for name, rows in tables.items()}
        self.closed = False
        self.operations = []

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        if table not in self.tables:
            raise AdapterError(f'relation "{table}" does not exist')
        return self.tables[table]

    def build_criteria(self, columns, search, filters):
        needle = search.lower() if search else None

        def matches(row):
            if needle and not any(needle in str(row.get(c, "")).lower() for c in columns):
                return False
            return all(row.get(c) == v for c, v in filters.items())

        return matches

    def execute(self, operation):
        self.operations.append(operation)
        return super().execute(operation)

    def list_targets(self):
        return list(self.tables)

    def close(self):
        self.closed = True

    def _matching(self, operation):
        criteria = operation.options.criteria
        return [row for row in self._rows(operation.target) if criteria is None or criteria(row)]

    def _find(self, operation):
        opts = operation.options
        rows = self._matching(operation)
        if opts.sort:
            rows = sorted(rows, key=lambda r: r.get(opts.sort), reverse=opts.order == "DESC")
        rows = rows[opts.offset:]
        if opts.limit is not None:
            rows = rows[: opts.limit]
        return [dict(row) for row in rows]

    def _insert(self, operation):
        rows = self._rows(operation.target)
        new_id = max([row.get("id", 0) for row in rows] or [0]) + 1
        row = {"id": new_id}
        row.update(strip_generated_id(operation.values))
        rows.append(row)
        return [{"insertedId": new_id}]

    def _update(self, operation):
        matched = 0
        for row in self._rows(operation.target):
            if str(row.get("id")) == str(operation.record_id):
                row.update(operation.values)
                matched += 1
        return [{"affectedRows": matched}]

    def _delete(self, operation):
        wanted = {str(i) for i in operation.ids}
        rows = self._rows(operation.target)
        kept = [row for row in rows if str(row.get("id")) not in wanted]
        self.tables[operation.target] = kept
        return [{"deletedCount": len(rows) - len(kept)}]

    def _count(self, operation):
        return [{"total": len(self._matching(operation))}]

    def _describe(self, operation):
        rows = self._rows(operation.target)
        if not rows:
            return []
        return [{"column_name": key, "data_type": type(value).__name__} for key, value in rows[0].items()]


def seed_tables() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "users": [
            {"id": 1, "name": "Alice", "city": "Paris"},
            {"id": 2, "name": "bob", "city": "Berlin"},
            {"id": 3, "name": "Carol", "city": "Paris"},
            {"id": 4, "name": "Dave", "city": "Oslo"},
            {"id": 5, "name": "Eve", "city": "Rome"},
        ],
        "pairs": [{"a": 1, "b": 2}, {"a": 3, "b": 4}],
        "empty": [],
    }


@pytest.fixture
def gateway(monkeypatch):
    from api.main import app

    opened = []
    factories = {}

    def connector(config):
        if config.host == "unreachable":
            raise ConnectionError("could not connect to server: Connection refused")
        factory = factories.get(config.engine_type)
        adapter = factory(config) if factory else InMemoryAdapter(seed_tables(), engine=config.engine_type)
        opened.append(adapter)
        return adapter

    registry = ConnectionRegistry(connector=connector)
    monkeypatch.setattr("api.routes.registry", registry)
    monkeypatch.setattr("api.routes.dispatcher", Dispatcher(registry))
    return SimpleNamespace(client=TestClient(app), registry=registry, opened=opened, factories=factories)


@pytest.fixture
def connect_body():
    def build(engine_type="postgres", host="db.local"):
        return {
            "host": host,
            "port": "5432",
            "username": "admin",
            "password": "s3cret",
            "database": "shop",
            "engineType": engine_type,
        }

    return build
