"""Unit tests for Engine."""

from __future__ import annotations

import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from media_query.core.connection import ConnectionManager
from media_query.core.engine import Engine, ExecutionResult
from media_query.core.exceptions import (
    EmptyTemplate,
    ExecutionError,
    StatementExecutionFailed,
    TemplateNotFound,
)
from media_query.core.params import ParamConverter
from media_query.mapping.fetch_mode import ClassHydration, FunctionFactory


class Todo:
    def __init__(self, id: str, title: str) -> None:
        self.id = id
        self.title = title


@pytest.fixture
def engine(todo_engine: Engine) -> Engine:
    todo_engine.run("todo.add", {"id": "1", "title": "run"})
    todo_engine.run("todo.add", {"id": "2", "title": "walk"})
    return todo_engine


class TestExecute:
    def test_select_returns_row_list(self, engine: Engine) -> None:
        result = engine.execute("todo.list")
        assert isinstance(result, ExecutionResult)
        assert result.data_returning is True
        assert result.rows == [{"id": "1", "title": "run"}, {"id": "2", "title": "walk"}]

    def test_insert_returns_empty(self, engine: Engine) -> None:
        result = engine.execute("todo.add", {"id": "3", "title": "swim"})
        assert result.is_empty
        assert result.rows == []
        assert result.first() is None

    def test_fetch_one_returns_first_row(self, engine: Engine) -> None:
        assert engine.fetch_one("todo.list") == {"id": "1", "title": "run"}

    def test_fetch_one_returns_none_on_zero_rows(self, engine: Engine) -> None:
        assert engine.fetch_one("todo.item", {"id": "999"}) is None

    def test_fetch_one_distinguishes_null_row(self, engine: Engine, write_sql) -> None:
        write_sql("todo/nulls.sql", "SELECT NULL AS id, NULL AS title")
        assert engine.fetch_one("todo.nulls") == {"id": None, "title": None}

    def test_fetch_all_with_class_hydration(self, engine: Engine) -> None:
        todos = engine.fetch_all("todo.list", fetch_mode=ClassHydration(Todo))
        assert [type(todo) for todo in todos] == [Todo, Todo]
        assert [todo.title for todo in todos] == ["run", "walk"]

    def test_fetch_all_with_function_factory(self, engine: Engine) -> None:
        titles = engine.fetch_all("todo.list", fetch_mode=FunctionFactory(lambda id, title: title.upper()))
        assert titles == ["RUN", "WALK"]

    def test_run_returns_nothing(self, engine: Engine) -> None:
        assert engine.run("todo.add", {"id": "3", "title": "swim"}) is None
        assert len(engine.fetch_all("todo.list")) == 3

    def test_caller_params_are_not_mutated(self, engine: Engine) -> None:
        params = {"id": "3", "title": datetime.date(2024, 1, 2)}
        engine.run("todo.add", params)
        assert params["title"] == datetime.date(2024, 1, 2)
        assert engine.fetch_one("todo.item", {"id": "3"})["title"] == "2024-01-02"


class TestMultiStatementTemplates:
    def test_statements_run_in_order_and_last_one_decides(
        self, engine: Engine, write_sql
    ) -> None:
        write_sql(
            "todo/reset.sql",
            "DELETE FROM todo;\nINSERT INTO todo (id, title) VALUES (:id, :title);\n"
            "SELECT id, title FROM todo;\n",
        )
        rows = engine.fetch_all("todo.reset", {"id": "9", "title": "sleep"})
        assert rows == [{"id": "9", "title": "sleep"}]

    def test_select_followed_by_write_is_not_data_returning(
        self, engine: Engine, write_sql
    ) -> None:
        write_sql("todo/touch.sql", "SELECT * FROM todo; DELETE FROM todo WHERE id = :id;")
        result = engine.execute("todo.touch", {"id": "1"})
        assert result.is_empty
        assert [row["id"] for row in engine.fetch_all("todo.list")] == ["2"]

    def test_commented_select_is_data_returning(self, engine: Engine, write_sql) -> None:
        write_sql("todo/commented.sql", "/* all todos */\nSELECT id FROM todo ORDER BY id;")
        assert engine.fetch_all("todo.commented") == [{"id": "1"}, {"id": "2"}]

    def test_select_in_comment_does_not_count(self, engine: Engine, write_sql) -> None:
        write_sql(
            "todo/sneaky.sql",
            "/* SELECT fake */ INSERT INTO todo (id, title) VALUES ('3', 'swim');",
        )
        assert engine.execute("todo.sneaky").is_empty

    def test_statements_are_sent_with_comments(self, engine: Engine, write_sql) -> None:
        write_sql("todo/commented.sql", "/* keep me */ SELECT 1 AS one")
        with patch.object(
            engine._connection_manager.adapter,
            "execute",
            wraps=engine._connection_manager.adapter.execute,
        ) as spy:
            engine.fetch_all("todo.commented")
        assert spy.call_args.args[1] == "/* keep me */ SELECT 1 AS one"


class TestErrors:
    def test_template_not_found(self, engine: Engine) -> None:
        with pytest.raises(TemplateNotFound, match="nonexistent.query"):
            engine.fetch_all("nonexistent.query")

    def test_empty_template(self, engine: Engine, write_sql) -> None:
        write_sql("todo/blank.sql", "\n;\n")
        with pytest.raises(EmptyTemplate):
            engine.execute("todo.blank")

    def test_backend_error_is_wrapped(self, engine: Engine, write_sql) -> None:
        write_sql("todo/broken.sql", "SELECT * FROM no_such_table")
        with pytest.raises(StatementExecutionFailed) as exc_info:
            engine.execute("todo.broken", {"id": "1"})
        error = exc_info.value
        assert "no such table: no_such_table" in str(error)
        assert "todo.broken.sql" in str(error)
        assert '{"id": "1"}' in str(error)
        assert error.template_id == "todo.broken"
        assert error.params == {"id": "1"}
        assert error.__cause__ is not None

    def test_failure_halts_remaining_statements(self, engine: Engine, write_sql) -> None:
        write_sql(
            "todo/halt.sql",
            "INSERT INTO todo (id, title) VALUES ('1', 'duplicate');\n"
            "DELETE FROM todo;",
        )
        with pytest.raises(StatementExecutionFailed, match="UNIQUE"):
            engine.execute("todo.halt")
        assert len(engine.fetch_all("todo.list")) == 2

    def test_missing_bind_parameter(self, engine: Engine) -> None:
        with pytest.raises(StatementExecutionFailed, match="todo.item"):
            engine.fetch_one("todo.item", {})

    def test_error_while_fetching_rows_is_wrapped(self, engine: Engine, write_sql) -> None:
        write_sql(
            "doc/create.sql",
            "CREATE TABLE doc (body TEXT);\n"
            "INSERT INTO doc VALUES ('{\"a\": 1}');\n"
            "INSERT INTO doc VALUES ('bad');\n",
        )
        write_sql(
            "doc/add_todo_and_read.sql",
            "INSERT INTO todo (id, title) VALUES (:id, :title);\n"
            "SELECT json_extract(body, '$.a') AS a FROM doc ORDER BY rowid;\n",
        )
        engine.run("doc.create")

        with pytest.raises(StatementExecutionFailed, match="malformed JSON") as exc_info:
            engine.fetch_all("doc.add_todo_and_read", {"id": "9", "title": "late"})
        assert exc_info.value.template_id == "doc.add_todo_and_read"
        # the insert of the same call was rolled back
        assert engine.fetch_one("todo.item", {"id": "9"}) is None

    def test_error_at_commit_is_wrapped(self, engine: Engine) -> None:
        adapter = engine._connection_manager.adapter
        connection = MagicMock()
        connection.commit.side_effect = RuntimeError("deferred constraint violated")
        with patch.object(engine._connection_manager, "get_connection") as get_connection:
            get_connection.return_value.__enter__.return_value = connection
            with patch.object(adapter, "execute") as execute:
                execute.return_value.description = None
                with pytest.raises(StatementExecutionFailed, match="deferred constraint"):
                    engine.run("todo.add", {"id": "3", "title": "swim"})
        connection.rollback.assert_called_once_with()


class TestCollaborators:
    def test_logger_called_once_per_execute(
        self, manager: ConnectionManager, tmp_sql_dir: Path, write_sql
    ) -> None:
        write_sql("multi.sql", "SELECT 1; SELECT 2;")
        query_logger = MagicMock()
        engine = Engine(manager, tmp_sql_dir, logger=query_logger)
        engine.execute("multi", {"a": 1})
        query_logger.start.assert_called_once_with()
        query_logger.log.assert_called_once_with("multi", {"a": 1})

    def test_logger_not_called_on_failure(
        self, manager: ConnectionManager, tmp_sql_dir: Path, write_sql
    ) -> None:
        write_sql("broken.sql", "SELECT * FROM nowhere")
        query_logger = MagicMock()
        engine = Engine(manager, tmp_sql_dir, logger=query_logger)
        with pytest.raises(StatementExecutionFailed):
            engine.execute("broken")
        query_logger.log.assert_not_called()

    def test_param_converter_defaults(
        self, manager: ConnectionManager, tmp_sql_dir: Path, write_sql
    ) -> None:
        write_sql("now.sql", "SELECT :created_at AS created_at")
        converter = ParamConverter({"created_at": lambda: datetime.datetime(2024, 5, 6, 7, 8, 9)})
        engine = Engine(manager, tmp_sql_dir, param_converter=converter)
        assert engine.fetch_one("now") == {"created_at": "2024-05-06 07:08:09"}

    def test_last_cursor(self, engine: Engine) -> None:
        engine.fetch_all("todo.list")
        assert engine.last_cursor.description[0][0] == "id"

    def test_last_cursor_before_any_call(
        self, manager: ConnectionManager, tmp_sql_dir: Path
    ) -> None:
        engine = Engine(manager, tmp_sql_dir)
        with pytest.raises(ExecutionError):
            engine.last_cursor

    def test_fetch_count(self, engine: Engine) -> None:
        assert engine.fetch_count("todo.list") == 2
        assert engine.fetch_count("todo.item", {"id": "1"}) == 1
