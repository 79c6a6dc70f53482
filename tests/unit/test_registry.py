import pytest

from adapters.base import ConfigurationError
from gateway.config import ConnectionConfig
from gateway.registry import ConnectionRegistry, NoActiveConnectionError


class StubAdapter:
    def __init__(self, engine, targets=None, fail_listing=False, fail_close=False):
        self.engine = engine
        self.targets = targets if targets is not None else ["users"]
        self.fail_listing = fail_listing
        self.fail_close = fail_close
        self.closed = 0

    def list_targets(self):
        if self.fail_listing:
            raise PermissionError("access denied for user")
        return list(self.targets)

    def close(self):
        self.closed += 1
        if self.fail_close:
            raise OSError("socket already closed")


def make_config(engine_type="postgres", password="hunter2"):
    return ConnectionConfig(
        host="db.local", port=5432, username="admin", password=password, database="shop", engine_type=engine_type
    )


@pytest.fixture
def registry_with_stubs():
    created = []

    def connector(config):
        adapter = StubAdapter(config.engine_type, fail_listing=config.database == "locked")
        created.append(adapter)
        return adapter

    return ConnectionRegistry(connector=connector), created


def test_config_never_exposes_password():
    config = make_config()
    assert "hunter2" not in repr(config)
    assert config.redacted()["password"] == "[masked]"
    assert make_config(password="").redacted()["password"] == ""
    assert config.as_source_config()["password"] == "hunter2"


def test_lease_without_connection_fails_fast(registry_with_stubs):
    registry, created = registry_with_stubs
    assert registry.current() is None
    with pytest.raises(NoActiveConnectionError, match="No active connection"):
        with registry.lease():
            pass
    assert created == []


def test_connect_returns_targets_and_installs_handle(registry_with_stubs):
    registry, created = registry_with_stubs
    assert registry.connect(make_config("mysql")) == ["users"]
    handle = registry.current()
    assert handle.adapter is created[0]
    assert handle.engine == "mysql"
    assert handle.config.database == "shop"


def test_unsupported_engine_never_reaches_connector(registry_with_stubs):
    registry, created = registry_with_stubs
    with pytest.raises(ConfigurationError, match="Unsupported database type"):
        registry.connect(make_config("sqlite"))
    assert created == []


def test_reconnect_closes_idle_previous_handle(registry_with_stubs):
    registry, created = registry_with_stubs
    registry.connect(make_config("mysql"))
    registry.connect(make_config("mongodb"))
    assert created[0].closed == 1
    assert created[1].closed == 0
    assert registry.current().engine == "mongodb"


def test_superseded_handle_closes_after_last_lease(registry_with_stubs):
    registry, created = registry_with_stubs
    registry.connect(make_config("mysql"))

    with registry.lease() as old_handle:
        with registry.lease():
            registry.connect(make_config("postgres"))
            assert old_handle.retired is True
            assert created[0].closed == 0
        assert created[0].closed == 0
    assert created[0].closed == 1
    assert old_handle.closed is True

    with registry.lease() as new_handle:
        assert new_handle.adapter is created[1]


def test_failed_listing_keeps_previous_handle(registry_with_stubs):
    registry, created = registry_with_stubs
    registry.connect(make_config("mysql"))
    locked = ConnectionConfig(
        host="db.local", port=5432, username="admin", password="pw", database="locked", engine_type="postgres"
    )
    with pytest.raises(PermissionError):
        registry.connect(locked)
    assert created[1].closed == 1
    assert registry.current().adapter is created[0]
    assert created[0].closed == 0


def test_close_failure_is_logged_not_raised(caplog):
    adapters = iter([StubAdapter("mysql", fail_close=True), StubAdapter("postgres")])
    registry = ConnectionRegistry(connector=lambda config: next(adapters))
    registry.connect(make_config("mysql"))
    registry.connect(make_config("postgres"))
    assert "Failed to close mysql connection" in caplog.text


def test_close_shuts_down_active_handle(registry_with_stubs):
    registry, created = registry_with_stubs
    registry.connect(make_config("postgres"))
    registry.close()
    assert created[0].closed == 1
    assert registry.current() is None
    registry.close()
    assert created[0].closed == 1
