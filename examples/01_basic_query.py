"""
Example 01: Basic Query Execution

This example runs SQL templates by name with the Engine: single-statement
queries, a multi-statement template, and statements that return nothing.
"""

import tempfile
from pathlib import Path

from media_query import ConnectionConfig, Engine


def main():
    sql_dir = Path(tempfile.mkdtemp())
    todo_dir = sql_dir / "todo"
    todo_dir.mkdir()

    # One file per template; the template id is the path with dots
    (todo_dir / "create.sql").write_text(
        "CREATE TABLE todo (id TEXT PRIMARY KEY, title TEXT NOT NULL, done INTEGER DEFAULT 0);"
    )
    (todo_dir / "add.sql").write_text("INSERT INTO todo (id, title) VALUES (:id, :title);")
    (todo_dir / "item.sql").write_text("SELECT * FROM todo WHERE id = :id")
    (todo_dir / "list.sql").write_text("SELECT * FROM todo ORDER BY id")
    (todo_dir / "finish.sql").write_text(
        "UPDATE todo SET done = 1 WHERE id = :id;\n"
        "SELECT * FROM todo WHERE id = :id;\n"
    )

    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    engine = Engine.from_config(config, sql_dir)

    print("=== Basic Query Execution ===\n")

    engine.run("todo.create")
    engine.run("todo.add", {"id": "1", "title": "run"})
    engine.run("todo.add", {"id": "2", "title": "read"})

    # fetch_one: first row or None
    todo = engine.fetch_one("todo.item", {"id": "1"})
    print(f"fetch_one result: {todo}")
    print(f"missing item: {engine.fetch_one('todo.item', {'id': '9'})}\n")

    # fetch_all: every row of the last statement
    todos = engine.fetch_all("todo.list")
    print(f"fetch_all result ({len(todos)} rows):")
    for todo in todos:
        print(f"  - {todo['id']}: {todo['title']}")
    print()

    # Multi-statement template: statements run in order, the last one's rows come back
    result = engine.execute("todo.finish", {"id": "2"})
    print(f"data returning: {result.data_returning}, row: {result.first()}\n")

    # A template ending in a non-SELECT statement yields no rows
    result = engine.execute("todo.add", {"id": "3", "title": "write"})
    print(f"insert is empty: {result.is_empty}\n")

    print(f"Profile:\n{engine.logger}")
    engine.close()


if __name__ == "__main__":
    main()
