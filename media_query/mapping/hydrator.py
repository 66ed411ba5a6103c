"""Result hydration.

Turns a DB-API cursor into return values according to a fetch mode:

    Default()                        -> [{"id": "1", "title": "run"}, ...]
    ClassHydration(Todo)             -> [Todo("1", "run"), ...]
    FunctionFactory(make_todo)       -> [make_todo("1", "run"), ...]
    MethodFactory(TodoFactory)       -> [TodoFactory().factory("1", "run"), ...]
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from media_query.core.exceptions import HydrationError
from media_query.core.injector import DependencyResolver, Injector
from media_query.core.return_entity import locate_type
from media_query.mapping.fetch_mode import (
    ClassHydration,
    Default,
    FetchMode,
    FunctionFactory,
    MethodFactory,
)
from media_query.mapping.model import ModelMapper
from media_query.mapping.protocol import Mapper


def cursor_columns(cursor: Any) -> list[str]:
    """Column names of a cursor, in SELECT order."""
    if cursor.description is None:
        return []
    return [desc[0] for desc in cursor.description]


def row_values(row: Any) -> tuple[Any, ...]:
    """Values of a row in column order.

    The bundled adapters produce tuple-like rows (tuples, sqlite3.Row);
    dict rows from custom adapters are read in insertion order.
    """
    if isinstance(row, dict):
        return tuple(row.values())
    return tuple(row)


class RecordMapper:
    """Maps a row to a dict of column name to value."""

    def map_row(self, columns: Sequence[str], values: Sequence[Any]) -> dict[str, Any]:
        return dict(zip(columns, values, strict=True))


class FactoryMapper:
    """Maps a row by calling ``factory(*values)``."""

    def __init__(self, factory: Callable[..., Any], label: str) -> None:
        self._factory = factory
        self._label = label

    def map_row(self, columns: Sequence[str], values: Sequence[Any]) -> Any:
        try:
            return self._factory(*values)
        except TypeError as e:
            raise HydrationError(self._label, str(e)) from e


class ResultHydrator:
    """Converts result rows into the representation a fetch mode asks for.

    Args:
        injector: Resolver used for ``MethodFactory`` targets given as classes.
    """

    def __init__(self, injector: DependencyResolver | None = None) -> None:
        self._injector = injector if injector is not None else Injector()

    def mapper_for(self, fetch_mode: FetchMode | None) -> Mapper[Any]:
        """Resolve the row mapper for a fetch mode."""
        if fetch_mode is None or isinstance(fetch_mode, Default):
            return RecordMapper()

        if isinstance(fetch_mode, ClassHydration):
            target = fetch_mode.cls
            if isinstance(target, str):
                resolved = locate_type(target)
                if resolved is None:
                    raise HydrationError(target, "class does not exist")
                target = resolved
            return ModelMapper(target)

        if isinstance(fetch_mode, FunctionFactory):
            if not callable(fetch_mode.func):
                raise HydrationError(repr(fetch_mode.func), "factory is not callable")
            label = getattr(fetch_mode.func, "__qualname__", repr(fetch_mode.func))
            return FactoryMapper(fetch_mode.func, label)

        if isinstance(fetch_mode, MethodFactory):
            instance = fetch_mode.target
            if isinstance(instance, type):
                instance = self._injector.get_instance(instance)
            method = getattr(instance, fetch_mode.method_name, None)
            label = f"{type(instance).__name__}.{fetch_mode.method_name}"
            if not callable(method):
                raise HydrationError(label, "factory method is not defined")
            return FactoryMapper(method, label)

        raise HydrationError(repr(fetch_mode), "unknown fetch mode")

    def hydrate(self, cursor: Any, fetch_mode: FetchMode | None = None) -> list[Any]:
        """Fetch all remaining rows of *cursor* and hydrate them."""
        columns = cursor_columns(cursor)
        return self.hydrate_rows(columns, cursor.fetchall(), fetch_mode)

    def hydrate_rows(
        self,
        columns: Sequence[str],
        rows: Sequence[Any],
        fetch_mode: FetchMode | None = None,
    ) -> list[Any]:
        """Hydrate rows that were already fetched.

        Raises:
            HydrationError: If a row does not carry one value per column,
                e.g. a dict row that collapsed duplicate column names.
        """
        mapper = self.mapper_for(fetch_mode)
        hydrated = []
        for row in rows:
            values = row_values(row)
            if len(values) != len(columns):
                raise HydrationError(
                    "row", f"{len(values)} value(s) for {len(columns)} column(s) {list(columns)}"
                )
            hydrated.append(mapper.map_row(columns, values))
        return hydrated
