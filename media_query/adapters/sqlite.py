"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import Any

from media_query.adapters.pool import ConnectionListAdapter
from media_query.core.connection import ConnectionConfig


class SqliteAdapter(ConnectionListAdapter):
    """SQLite adapter. ``:memory:`` databases should use ``pool_size=1``
    so every call sees the same database."""

    paramstyle = "named"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        conn = sqlite3.connect(config.database, **config.extra)
        # Tuple-like rows that also allow access by column name
        conn.row_factory = sqlite3.Row
        return conn

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params or {})
