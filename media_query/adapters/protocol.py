"""Backend contract for the engine and the pagination view.

Neither talks to a driver directly: they borrow a connection through the
adapter, hand it a statement with placeholders already rewritten to
``paramstyle``, and read columns from ``cursor.description``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from media_query.core.connection import ConnectionConfig


@runtime_checkable
class Adapter(Protocol):
    """What a backend must provide.

    Cursors returned by ``execute`` yield tuple-like rows whose values line
    up with ``description``; duplicate column names keep one value each.
    ``description`` is None for statements that return no rows.
    """

    paramstyle: str

    def create_pool(self, config: ConnectionConfig) -> Any: ...

    def acquire_connection(self, pool: Any) -> Any: ...

    def release_connection(self, connection: Any, pool: Any) -> None: ...

    def close_pool(self, pool: Any) -> None: ...

    def execute(self, connection: Any, sql: str, params: dict[str, Any] | None = None) -> Any: ...
