"""
Example 02: Fetch Modes

This example hydrates rows four ways: plain dicts, entity classes,
factory functions, and factory classes resolved through an Injector.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path

from media_query import (
    ClassHydration,
    ConnectionConfig,
    Default,
    Engine,
    FunctionFactory,
    Injector,
    MethodFactory,
)


@dataclass
class Todo:
    """Todo entity"""
    id: str
    title: str


class Formatter:
    def __init__(self, prefix: str):
        self.prefix = prefix


class TodoLabelFactory:
    """Factory class with its own dependency"""

    def __init__(self, formatter: Formatter):
        self.formatter = formatter

    def factory(self, id: str, title: str) -> str:
        return f"{self.formatter.prefix}{id} {title}"


def make_todo(id: str, title: str) -> Todo:
    return Todo(id, title.capitalize())


def main():
    sql_dir = Path(tempfile.mkdtemp())
    todo_dir = sql_dir / "todo"
    todo_dir.mkdir()
    (todo_dir / "setup.sql").write_text(
        "CREATE TABLE todo (id TEXT PRIMARY KEY, title TEXT NOT NULL);\n"
        "INSERT INTO todo VALUES ('1', 'run');\n"
        "INSERT INTO todo VALUES ('2', 'read');\n"
    )
    (todo_dir / "list.sql").write_text("SELECT id, title FROM todo ORDER BY id")

    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)
    injector = Injector({TodoLabelFactory: lambda: TodoLabelFactory(Formatter("#"))})
    engine = Engine.from_config(config, sql_dir, injector=injector)
    engine.run("todo.setup")

    print("=== Fetch Modes ===\n")

    print(f"Default:        {engine.fetch_all('todo.list', fetch_mode=Default())}")
    print(f"ClassHydration: {engine.fetch_all('todo.list', fetch_mode=ClassHydration(Todo))}")
    print(
        "FunctionFactory:",
        engine.fetch_all("todo.list", fetch_mode=FunctionFactory(make_todo)),
    )
    print(
        "MethodFactory:  ",
        engine.fetch_all("todo.list", fetch_mode=MethodFactory(TodoLabelFactory)),
    )

    engine.close()


if __name__ == "__main__":
    main()
