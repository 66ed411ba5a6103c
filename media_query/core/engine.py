"""Query execution engine.

The Engine loads a named SQL template, runs its statements in order on one
connection, decides from the last statement whether rows come back, and
hydrates them according to a fetch mode.

    engine.run("todo.add", {"id": "1", "title": "run"})
    engine.fetch_one("todo.item", {"id": "1"})                       # dict | None
    engine.fetch_all("todo.list", fetch_mode=ClassHydration(Todo))   # list[Todo]
    engine.paginate("todo.list", {}, per_page=10)[2].items
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from media_query.core.connection import ConnectionConfig, ConnectionManager
from media_query.core.exceptions import ExecutionError, StatementExecutionFailed
from media_query.core.injector import DependencyResolver, Injector
from media_query.core.logger import MediaQueryLogger, QueryLogger
from media_query.core.pages import DEFAULT_URI_TEMPLATE, Pages
from media_query.core.params import ParamConverter, normalize_params
from media_query.core.registry import SQLTemplateStore
from media_query.core.statement import is_data_returning
from media_query.mapping.fetch_mode import FetchMode, fetch_mode_for
from media_query.mapping.hydrator import ResultHydrator, cursor_columns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one template execution.

    ``data_returning`` is False for templates ending in a non-SELECT
    statement; ``rows`` is then always empty.
    """

    data_returning: bool
    rows: list[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.data_returning

    def first(self) -> Any | None:
        """The first row, or None when there is none."""
        return self.rows[0] if self.rows else None


class Engine:
    """Synchronous query execution engine.

    Args:
        connection_manager: Backend connections.
        templates: SQL template store, or its root directory.
        logger: Profiler called around every successful execution.
        param_converter: Normalizer applied to a copy of the parameters.
        injector: Resolver for factory classes of ``MethodFactory``.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        templates: SQLTemplateStore | Path | str,
        *,
        logger: QueryLogger | None = None,
        param_converter: ParamConverter | None = None,
        injector: DependencyResolver | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        if not isinstance(templates, SQLTemplateStore):
            templates = SQLTemplateStore(templates)
        self._templates = templates
        self._logger: QueryLogger = logger if logger is not None else MediaQueryLogger()
        self._param_converter = param_converter if param_converter is not None else ParamConverter()
        self._hydrator = ResultHydrator(injector if injector is not None else Injector())
        self._paramstyle = connection_manager.adapter.paramstyle
        self._last_cursor: Any = None

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        templates: SQLTemplateStore | Path | str,
        **collaborators: Any,
    ) -> Engine:
        """Create an Engine from a ConnectionConfig and a template directory."""
        return cls(ConnectionManager(config), templates, **collaborators)

    @property
    def templates(self) -> SQLTemplateStore:
        return self._templates

    @property
    def logger(self) -> QueryLogger:
        return self._logger

    @property
    def hydrator(self) -> ResultHydrator:
        return self._hydrator

    @property
    def last_cursor(self) -> Any:
        """Cursor of the most recently executed statement."""
        if self._last_cursor is None:
            raise ExecutionError("No statement has been executed yet")
        return self._last_cursor

    def _convert(self, params: dict[str, Any] | None) -> dict[str, Any]:
        values = dict(params or {})
        self._param_converter(values)
        return values

    def execute(
        self,
        template_id: str,
        params: dict[str, Any] | None = None,
        fetch_mode: FetchMode | None = None,
    ) -> ExecutionResult:
        """Run every statement of a template and hydrate the last one's rows.

        Raises:
            TemplateNotFound: If the template does not exist.
            EmptyTemplate: If the template holds no statement.
            StatementExecutionFailed: If the backend rejects a statement;
                the remaining statements are not run.
            HydrationError: If rows cannot be turned into *fetch_mode*.
        """
        statements = self._templates.load(template_id)
        values = self._convert(params)
        self._last_cursor = None
        self._logger.start()

        adapter = self._connection_manager.adapter
        data_returning = is_data_returning(statements[-1])
        with self._connection_manager.get_connection() as conn:
            # Drivers may report errors while rows are stepped or at commit
            try:
                for sql in statements:
                    self._last_cursor = adapter.execute(
                        conn, normalize_params(sql, self._paramstyle), values
                    )
                columns = cursor_columns(self._last_cursor) if data_returning else []
                raw_rows = self._last_cursor.fetchall() if data_returning else []
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.debug("statement of %s failed: %s", template_id, e)
                raise StatementExecutionFailed(str(e), template_id, values) from e

        rows = self._hydrator.hydrate_rows(columns, raw_rows, fetch_mode) if data_returning else []

        self._logger.log(template_id, values)
        return ExecutionResult(data_returning, rows)

    def run(self, template_id: str, params: dict[str, Any] | None = None) -> None:
        """Execute a template for its side effects."""
        self.execute(template_id, params)

    def fetch_all(
        self,
        template_id: str,
        params: dict[str, Any] | None = None,
        fetch_mode: FetchMode | None = None,
    ) -> list[Any]:
        """All rows of the template's last statement."""
        return self.execute(template_id, params, fetch_mode).rows

    def fetch_one(
        self,
        template_id: str,
        params: dict[str, Any] | None = None,
        fetch_mode: FetchMode | None = None,
    ) -> Any | None:
        """The first row of the template's last statement, or None."""
        return self.execute(template_id, params, fetch_mode).first()

    def fetch_count(self, template_id: str, params: dict[str, Any] | None = None) -> int:
        """Number of rows a single-statement SELECT template yields, counted by the backend."""
        sql = self._templates.load_single(template_id)
        values = self._convert(params)
        pages = Pages(self._connection_manager, sql, values, 1, self._hydrator, template_id=template_id)
        return pages.count()

    def paginate(
        self,
        template_id: str,
        params: dict[str, Any] | None,
        per_page: int | str,
        uri_template: str = DEFAULT_URI_TEMPLATE,
        entity: type | str | None = None,
        fetch_mode: FetchMode | None = None,
    ) -> Pages:
        """Lazily paginated view over a SELECT template. Runs no query by itself.

        Args:
            per_page: Items per page, or the name of a key in *params*.
            entity: Class rows are hydrated into; shorthand for
                ``fetch_mode=ClassHydration(entity)``.

        Raises:
            InvalidPagerConfiguration: If *per_page* cannot be resolved.
        """
        sql = self._templates.load_single(template_id)
        values = self._convert(params)
        return Pages(
            self._connection_manager,
            sql,
            values,
            per_page,
            self._hydrator,
            fetch_mode=fetch_mode if fetch_mode is not None else fetch_mode_for(entity),
            uri_template=uri_template,
            template_id=template_id,
        )

    def close(self) -> None:
        """Close the backend connections."""
        self._connection_manager.close_pool()
