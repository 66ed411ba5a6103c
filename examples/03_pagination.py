"""
Example 03: Pagination

This example pages through a SELECT template. Nothing runs until the count
or a page is read, and each result is queried once.
"""

import tempfile
from pathlib import Path

from media_query import ConnectionConfig, Engine


def main():
    sql_dir = Path(tempfile.mkdtemp())
    todo_dir = sql_dir / "todo"
    todo_dir.mkdir()
    (todo_dir / "create.sql").write_text("CREATE TABLE todo (id INTEGER PRIMARY KEY, title TEXT)")
    (todo_dir / "add.sql").write_text("INSERT INTO todo (title) VALUES (:title)")
    (todo_dir / "list.sql").write_text("SELECT id, title FROM todo ORDER BY id")

    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    engine = Engine.from_config(config, sql_dir)
    engine.run("todo.create")
    for i in range(1, 26):
        engine.run("todo.add", {"title": f"task {i}"})

    print("=== Pagination ===\n")

    pages = engine.paginate("todo.list", {}, per_page=10, uri_template="/todos{?page}")
    print(f"total rows: {pages.count()}, pages: {len(pages)}\n")

    page = pages[2]
    print(f"page {page.current}: {[todo['title'] for todo in page]}")
    print(f"has previous: {page.has_previous}, has next: {page.has_next}")
    print(f"navigation: {page}\n")

    # Items per page may also come from the parameters
    pages = engine.paginate("todo.list", {"size": 20}, per_page="size")
    print(f"last page holds {len(pages[2])} rows")

    engine.close()


if __name__ == "__main__":
    main()
