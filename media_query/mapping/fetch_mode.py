"""Fetch modes - how result rows become return values.

A fetch mode is one of four frozen variants. The hydrator dispatches on the
variant type; nothing else about the row conversion is configurable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Default:
    """Each row becomes a ``dict`` of column name to value."""


@dataclass(frozen=True)
class ClassHydration:
    """Each row becomes an instance of ``cls``.

    ``cls`` may be given as a class or as a dotted import path.
    """

    cls: type | str


@dataclass(frozen=True)
class FunctionFactory:
    """Each row's columns are passed positionally to ``func``."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class MethodFactory:
    """Each row's columns are passed positionally to ``target.<method_name>``.

    When ``target`` is a class, the instance is obtained from the dependency
    resolver, so the factory can carry its own dependencies.
    """

    target: Any
    method_name: str = "factory"


FetchMode = Union[Default, ClassHydration, FunctionFactory, MethodFactory]


def fetch_mode_for(entity: type | str | None) -> FetchMode:
    """Fetch mode for an optional entity type: class hydration or plain dicts."""
    if entity is None:
        return Default()
    return ClassHydration(entity)
