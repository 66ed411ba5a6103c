"""Repository base class and the ``db_query`` decorator.

A repository method decorated with ``db_query`` becomes a query call: its
arguments are the parameter set, and its return annotation (or the return
type documented in its docstring) decides how rows are hydrated.

    class TodoRepository(Repository):
        @db_query("todo.item")
        def item(self, id: str) -> Todo | None: ...

        @db_query("todo.list")
        def list(self) -> list[Todo]: ...

        @db_query("todo.add")
        def add(self, id: str, title: str) -> None: ...

        @db_query("todo.list", pager="per_page")
        def pages(self, per_page: int) -> Pages: ...
"""

from __future__ import annotations

import collections.abc
import functools
import inspect
import typing
from collections.abc import Callable
from typing import Any, TypeVar

from media_query.core.return_entity import (
    MethodDescriptor,
    NamedEntity,
    describe,
    documented_return,
    resolve,
    resolve_method,
    unwrap_optional,
)
from media_query.mapping.fetch_mode import (
    FetchMode,
    FunctionFactory,
    MethodFactory,
    fetch_mode_for,
)

F = TypeVar("F", bound=Callable[..., Any])

ROW = "row"
ROW_LIST = "row_list"
EXEC = "exec"

_LIST_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Collection,
)


class Repository:
    """Base repository class.

    Subclasses declare query methods with ``db_query``; the decorated
    methods delegate to ``self.engine``.
    """

    def __init__(self, engine: Any) -> None:
        self.engine = engine


def result_kind(func: Callable[..., Any]) -> str:
    """Infer whether a query method returns nothing, one row, or a row list."""
    return_type = describe(func).return_type
    if return_type is None:
        return ROW_LIST
    if return_type is type(None) or return_type == "None":
        return EXEC
    if isinstance(return_type, str):
        return ROW_LIST if return_type.startswith(("list", "Sequence", "Iterable", "tuple")) else ROW

    unwrapped = unwrap_optional(return_type)
    if unwrapped in _LIST_ORIGINS or typing.get_origin(unwrapped) in _LIST_ORIGINS:
        return ROW_LIST
    return ROW


def _factory_mode(factory: Any) -> FetchMode:
    if inspect.isclass(factory):
        return MethodFactory(factory)
    return FunctionFactory(factory)


def db_query(
    template_id: str,
    *,
    kind: str | None = None,
    pager: int | str | None = None,
    uri_template: str = "/{?page}",
    factory: Any = None,
    fetch_mode: FetchMode | None = None,
) -> Callable[[F], F]:
    """Turn a repository method into a call of the SQL template *template_id*.

    Args:
        kind: ``"row"``, ``"row_list"`` or ``"exec"``; inferred from the
            return annotation when omitted.
        pager: Items per page (or the name of the method argument holding
            it); the method then returns a lazy ``Pages`` view.
        uri_template: URI template for the pager's navigation markup.
        factory: Row factory; a function (``FunctionFactory``) or a class
            with a ``factory`` method (``MethodFactory``).
        fetch_mode: Explicit fetch mode, overriding inference.

    The hydration target is resolved on the first call and reused.
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)
        resolved: dict[str, Any] = {}

        def plan() -> tuple[str, FetchMode]:
            if not resolved:
                if fetch_mode is not None:
                    mode = fetch_mode
                elif factory is not None:
                    mode = _factory_mode(factory)
                elif pager is not None:
                    # The declared return is the view itself; rows are typed in the docstring
                    target = resolve(
                        MethodDescriptor(documented_return=documented_return(func)),
                        getattr(func, "__globals__", None),
                    )
                    mode = fetch_mode_for(target.entity if isinstance(target, NamedEntity) else None)
                else:
                    target = resolve_method(func)
                    mode = fetch_mode_for(target.entity if isinstance(target, NamedEntity) else None)
                resolved["kind"] = kind or result_kind(func)
                resolved["mode"] = mode
            return resolved["kind"], resolved["mode"]

        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(self, *args, **kwargs)
            bound.apply_defaults()
            params = dict(bound.arguments)
            params.pop(next(iter(signature.parameters)), None)

            query_kind, mode = plan()
            engine = self.engine
            if pager is not None:
                return engine.paginate(
                    template_id, params, pager, uri_template=uri_template, fetch_mode=mode
                )
            if query_kind == EXEC:
                engine.run(template_id, params)
                return None
            if query_kind == ROW:
                return engine.fetch_one(template_id, params, mode)
            return engine.fetch_all(template_id, params, mode)

        wrapper.template_id = template_id  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator
