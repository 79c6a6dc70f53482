import pytest

from adapters import SUPPORTED_ENGINES, get_adapter
from adapters.base import ConfigurationError
from adapters.factory import normalize_engine
from adapters.mongodb import MongoDBAdapter
from adapters.mysql import MySQLAdapter
from adapters.postgres import PostgresAdapter

SOURCE_CONFIG = {"host": "db.local", "port": 1234, "username": "admin", "password": "pw", "database": "shop"}


class FakeHandle:
    def __getitem__(self, name):
        return {"name": name}

    def close(self):
        return None


def test_exactly_three_engines_are_supported():
    assert SUPPORTED_ENGINES == ("mysql", "postgres", "mongodb")
    assert normalize_engine(" MySQL ") == "mysql"


@pytest.mark.parametrize("tag", ["oracle", "postgresql", "", None])
def test_unknown_engine_is_a_configuration_error(tag):
    with pytest.raises(ConfigurationError, match="Unsupported database type"):
        get_adapter(tag, SOURCE_CONFIG)


@pytest.mark.parametrize(
    "tag, adapter_cls",
    [("postgres", PostgresAdapter), ("mysql", MySQLAdapter), ("mongodb", MongoDBAdapter)],
)
def test_factory_selects_adapter_for_engine(monkeypatch, tag, adapter_cls):
    monkeypatch.setattr(adapter_cls, "_connect", lambda self: FakeHandle())
    adapter = get_adapter(tag, SOURCE_CONFIG, connect_timeout_ms=2500)
    assert isinstance(adapter, adapter_cls)
    assert adapter.engine == tag
    assert adapter.connect_timeout_ms == 2500


def test_factory_uses_configured_timeout(monkeypatch):
    monkeypatch.setenv("DB_CONNECT_TIMEOUT_MS", "7000")
    monkeypatch.setenv("DBGATEWAY_ENV_FILE", "does-not-exist.env")
    monkeypatch.setattr(PostgresAdapter, "_connect", lambda self: FakeHandle())
    assert get_adapter("postgres", SOURCE_CONFIG).connect_timeout_ms == 7000
