"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from media_query.core.connection import ConnectionConfig, ConnectionManager
from media_query.core.engine import Engine


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config with a single shared connection."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def tmp_sql_dir(tmp_path: Path) -> Path:
    """Temporary directory for SQL files."""
    sql_dir = tmp_path / "sql"
    sql_dir.mkdir()
    return sql_dir


@pytest.fixture
def write_sql(tmp_sql_dir: Path):
    """Helper to write SQL files into the temp directory.

    Usage:
        write_sql("todo/item.sql", "SELECT * FROM todo WHERE id = :id")
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_sql_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def manager(sqlite_config: ConnectionConfig):
    """Connection manager over an in-memory database, closed after the test."""
    cm = ConnectionManager(sqlite_config)
    yield cm
    cm.close_pool()


@pytest.fixture
def todo_engine(manager: ConnectionManager, tmp_sql_dir: Path, write_sql) -> Engine:
    """Engine with a ``todo`` table and its templates."""
    write_sql("todo/create.sql", "CREATE TABLE todo (id TEXT PRIMARY KEY, title TEXT NOT NULL)")
    write_sql("todo/add.sql", "INSERT INTO todo (id, title) VALUES (:id, :title)")
    write_sql("todo/item.sql", "SELECT id, title FROM todo WHERE id = :id")
    write_sql("todo/list.sql", "SELECT id, title FROM todo ORDER BY id")

    engine = Engine(manager, tmp_sql_dir)
    engine.run("todo.create")
    return engine
