"""
Example 04: Repository Pattern

This example declares query methods with ``db_query``. The method's
arguments become the query parameters and its return annotation decides
what comes back.
"""

import datetime
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from media_query import ConnectionConfig, Engine, Pages, ParamConverter, Repository, db_query


@dataclass
class Todo:
    """Todo entity"""
    id: str
    title: str
    created_at: str


class TodoRepository(Repository):
    """Repository for Todo entities"""

    @db_query("todo.add")
    def add(self, id: str, title: str, created_at: Optional[datetime.datetime] = None) -> None:
        ...

    @db_query("todo.item")
    def item(self, id: str) -> Optional[Todo]:
        ...

    @db_query("todo.list")
    def all(self) -> list[Todo]:
        ...

    @db_query("todo.list", pager="per_page")
    def pages(self, per_page: int) -> Pages:
        """:rtype: Pages[Todo]"""


def main():
    sql_dir = Path(tempfile.mkdtemp())
    todo_dir = sql_dir / "todo"
    todo_dir.mkdir()
    (todo_dir / "create.sql").write_text(
        "CREATE TABLE todo (id TEXT PRIMARY KEY, title TEXT NOT NULL, created_at TEXT NOT NULL)"
    )
    (todo_dir / "add.sql").write_text(
        "INSERT INTO todo (id, title, created_at) VALUES (:id, :title, :created_at)"
    )
    (todo_dir / "item.sql").write_text("SELECT * FROM todo WHERE id = :id")
    (todo_dir / "list.sql").write_text("SELECT * FROM todo ORDER BY id")

    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    # created_at defaults to now and is bound as "YYYY-MM-DD HH:MM:SS"
    converter = ParamConverter({"created_at": datetime.datetime.now})
    engine = Engine.from_config(config, sql_dir, param_converter=converter)
    engine.run("todo.create")
    todos = TodoRepository(engine)

    print("=== Repository Pattern ===\n")

    todos.add("1", "run")
    todos.add("2", "read")
    todos.add("3", "write")

    print(f"1. Find by id: {todos.item('2')}")
    print(f"2. Missing id: {todos.item('9')}")
    print(f"3. All todos: {[todo.title for todo in todos.all()]}")

    first = todos.pages(2)[1]
    print(f"4. First page: {[todo.id for todo in first]} (next: {first.has_next})")

    engine.close()


if __name__ == "__main__":
    main()
