"""Process-wide slot holding the single active database connection.

Swapping the active handle is done under a lock. A superseded handle is not
closed while requests still hold a lease on it; the last lease to be released
closes it.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from adapters import DatabaseAdapter, get_adapter
from adapters.factory import normalize_engine
from gateway.config import ConnectionConfig

LOG = logging.getLogger(__name__)

Connector = Callable[[ConnectionConfig], DatabaseAdapter]


class NoActiveConnectionError(RuntimeError):
    pass


def open_adapter(config: ConnectionConfig) -> DatabaseAdapter:
    return get_adapter(db_engine=config.engine_type, source_config=config.as_source_config())


class ConnectionHandle:
    def __init__(self, adapter: DatabaseAdapter, config: ConnectionConfig):
        self.adapter = adapter
        self.config = config
        self.leases = 0
        self.retired = False
        self.closed = False

    @property
    def engine(self) -> str:
        return self.adapter.engine


class ConnectionRegistry:
    def __init__(self, connector: Optional[Connector] = None):
        self._connector = connector or open_adapter
        self._lock = threading.Lock()
        self._active: Optional[ConnectionHandle] = None

    def connect(self, config: ConnectionConfig) -> List[str]:
        normalize_engine(config.engine_type)
        LOG.info("Connecting to database with config: %s", config.redacted())
        adapter = self._connector(config)
        try:
            targets = adapter.list_targets()
        except Exception:
            LOG.exception("Listing targets failed for %s; discarding new connection", config.engine_type)
            self._close_adapter(adapter)
            raise

        handle = ConnectionHandle(adapter, config)
        with self._lock:
            previous, self._active = self._active, handle
            close_previous = previous is not None and self._retire(previous)
        if close_previous:
            self._close_adapter(previous.adapter)
        LOG.info("Connected to %s database %r (%d targets)", config.engine_type, config.database, len(targets))
        return targets

    def current(self) -> Optional[ConnectionHandle]:
        with self._lock:
            return self._active

    @contextmanager
    def lease(self) -> Iterator[ConnectionHandle]:
        with self._lock:
            handle = self._active
            if handle is None:
                raise NoActiveConnectionError("No active connection. Please connect first.")
            handle.leases += 1
        try:
            yield handle
        finally:
            with self._lock:
                handle.leases -= 1
                close_now = handle.retired and handle.leases == 0 and not handle.closed
                if close_now:
                    handle.closed = True
            if close_now:
                self._close_adapter(handle.adapter)

    def close(self) -> None:
        with self._lock:
            handle, self._active = self._active, None
            close_now = handle is not None and self._retire(handle)
        if close_now:
            self._close_adapter(handle.adapter)

    @staticmethod
    def _retire(handle: ConnectionHandle) -> bool:
        # caller holds the lock
        handle.retired = True
        if handle.leases == 0 and not handle.closed:
            handle.closed = True
            return True
        return False

    @staticmethod
    def _close_adapter(adapter: DatabaseAdapter) -> None:
        try:
            adapter.close()
        except Exception:
            LOG.exception("Failed to close %s connection", adapter.engine)
