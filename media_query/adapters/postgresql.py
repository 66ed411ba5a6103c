"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from media_query.adapters.pool import ConnectionListAdapter
from media_query.core.connection import ConnectionConfig


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    fields = (
        ("host", config.host),
        ("port", config.port),
        ("user", config.user),
        ("password", config.password),
        ("dbname", config.database),
    )
    return " ".join(f"{key}={value}" for key, value in fields if value is not None)


class PostgresqlAdapter(ConnectionListAdapter):
    """PostgreSQL adapter.

    Rows keep psycopg's default tuple shape so that ``SELECT a.id, b.id``
    yields two values.
    """

    paramstyle = "pyformat"

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg

        return psycopg.connect(_build_conninfo(config), **config.extra)

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        # psycopg only interpolates when params is given; keep literal % intact otherwise
        return connection.execute(sql, params or None)
