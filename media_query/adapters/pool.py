"""Connection list shared by the bundled adapters.

A pool is a plain list of open connections sized by
``ConnectionConfig.pool_size``. Subclasses only say how one connection is
opened and how one statement is run.
"""

from __future__ import annotations

from typing import Any

from media_query.core.connection import ConnectionConfig
from media_query.core.exceptions import ConnectionError  # noqa: A004


class ConnectionListAdapter:
    """Base adapter keeping ``pool_size`` connections in a list."""

    paramstyle = "named"

    def connect(self, config: ConnectionConfig) -> Any:
        raise NotImplementedError

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        return [self.connect(config) for _ in range(config.pool_size)]

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise ConnectionError(f"{type(self).__name__}: every connection is in use")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        while pool:
            pool.pop().close()
