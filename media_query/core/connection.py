"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager hands out connections through the adapter protocol and
takes them back when a call completes.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from media_query.core.exceptions import AdapterError, ConnectionError  # noqa: A004


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = 5
    extra: dict[str, Any] = {}


# Adapter module mapping: driver name -> (module_path, class_name)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "sqlite": ("media_query.adapters.sqlite", "SqliteAdapter"),
    "postgresql": ("media_query.adapters.postgresql", "PostgresqlAdapter"),
    "mysql": ("media_query.adapters.mysql", "MysqlAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver_lower]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Connection manager using the Adapter protocol.

    Connections are opened lazily on first use and held by the manager; a
    call borrows one for its duration.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver)
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    def initialize_pool(self) -> Any:
        """Open the adapter's connections."""
        if self._pool is None:
            try:
                self._pool = self._adapter.create_pool(self.config)
            except AdapterError:
                raise
            except Exception as e:
                raise ConnectionError(
                    f"Cannot connect to {self.config.driver} database '{self.config.database}': {e}"
                ) from e
        return self._pool

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Borrow a connection as a context manager."""
        if self._pool is None:
            self.initialize_pool()
        connection = self._adapter.acquire_connection(self._pool)
        try:
            yield connection
        finally:
            self._adapter.release_connection(connection, self._pool)

    def close_pool(self) -> None:
        """Close all connections."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None
