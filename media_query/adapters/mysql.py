"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from media_query.adapters.pool import ConnectionListAdapter
from media_query.core.connection import ConnectionConfig


class MysqlAdapter(ConnectionListAdapter):
    """MySQL adapter with buffered tuple cursors.

    Buffered cursors let a template run its next statement before the
    previous statement's rows were read.
    """

    paramstyle = "pyformat"

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        options = {
            key: value
            for key, value in (
                ("host", config.host),
                ("port", config.port),
                ("user", config.user),
                ("password", config.password),
            )
            if value is not None
        }
        return mysql.connector.connect(database=config.database, **options, **config.extra)

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        cursor = connection.cursor(buffered=True)
        cursor.execute(sql, params or None)
        return cursor
