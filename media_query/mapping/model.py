"""Row-to-class mapper.

Supports Pydantic models, dataclasses, and plain classes.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from media_query.core.exceptions import HydrationError

T = TypeVar("T")

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

_SNAKE_SEGMENT = re.compile(r"_([a-z0-9])")


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return issubclass(cls, BaseModel)


def snake_to_camel(name: str) -> str:
    """``user_name`` -> ``userName``."""
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), name)


def constructor_parameters(cls: type) -> list[inspect.Parameter]:
    """Parameters of ``cls.__init__`` without ``self``; empty if none are declared."""
    if cls.__init__ is object.__init__:
        return []
    try:
        signature = inspect.signature(cls.__init__)
    except (TypeError, ValueError):
        return []
    return list(signature.parameters.values())[1:]


def bind_constructor_args(
    parameters: Sequence[inspect.Parameter],
    values: Sequence[Any],
) -> list[Any]:
    """Map row values onto constructor parameters by position.

    The first N values go to the N positional parameters, in column order.
    Extra columns are dropped unless the constructor accepts ``*args``.

    Raises:
        HydrationError: If fewer values than required parameters are given.
    """
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters):
        return list(values)

    positional = [p for p in parameters if p.kind in _POSITIONAL_KINDS]
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    if len(values) < len(required):
        missing = [p.name for p in required[len(values):]]
        raise HydrationError(
            "constructor",
            f"{len(values)} column(s) for {len(required)} required parameter(s), missing {missing}",
        )
    return list(values[: len(positional)])


def declared_fields(cls: type) -> set[str] | None:
    """Public annotated attributes across the MRO, or None if none are declared."""
    fields: set[str] = set()
    for klass in reversed(cls.__mro__):
        fields.update(
            name for name in getattr(klass, "__annotations__", {}) if not name.startswith("_")
        )
    return fields or None


class ModelMapper(Generic[T]):
    """Row-to-class mapper.

    Detection order:
    1. Pydantic BaseModel -> model_validate(record), matched by column name
    2. Constructor with positional parameters (dataclasses, plain classes)
       -> target_class(*columns), matched by column position
    3. No constructor parameters -> target_class(), then columns are
       assigned to fields of the same name

    Classes that set ``__camel_case_fields__ = True`` additionally receive
    ``snake_case`` columns on their ``camelCase`` fields in mode 3.

    Args:
        target_class: The class to construct from row data.
    """

    def __init__(self, target_class: type[T]) -> None:
        if not inspect.isclass(target_class):
            raise HydrationError(repr(target_class), "target is not a class")
        self._target_class = target_class
        self._is_pydantic = _is_pydantic_model(target_class)
        self._parameters = [] if self._is_pydantic else constructor_parameters(target_class)
        self._positional = any(
            p.kind in _POSITIONAL_KINDS or p.kind is inspect.Parameter.VAR_POSITIONAL
            for p in self._parameters
        )
        self._fields = declared_fields(target_class)
        self._camel_case = bool(getattr(target_class, "__camel_case_fields__", False))

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def map_row(self, columns: Sequence[str], values: Sequence[Any]) -> T:
        """Map a single row to a target_class instance."""
        name = self._target_class.__name__
        if self._is_pydantic:
            try:
                return self._target_class.model_validate(dict(zip(columns, values)))  # type: ignore[attr-defined, no-any-return]
            except Exception as e:
                raise HydrationError(name, str(e)) from e

        if self._positional:
            try:
                args = bind_constructor_args(self._parameters, values)
            except HydrationError as e:
                raise HydrationError(name, e.detail) from None
            try:
                return self._target_class(*args)
            except TypeError as e:
                raise HydrationError(name, str(e)) from e

        try:
            instance = self._target_class()
        except TypeError as e:
            raise HydrationError(name, str(e)) from e
        self._assign_fields(instance, columns, values)
        return instance

    def _assign_fields(self, instance: Any, columns: Sequence[str], values: Sequence[Any]) -> None:
        fields = self._fields
        for column, value in zip(columns, values):
            if fields is None or column in fields:
                setattr(instance, column, value)
            if self._camel_case:
                camel = snake_to_camel(column)
                if camel != column and (fields is None or camel in fields):
                    setattr(instance, camel, value)
