"""Mapping layer - turn result rows into dicts, entities or factory products."""

from __future__ import annotations

from media_query.mapping.fetch_mode import (
    ClassHydration,
    Default,
    FetchMode,
    FunctionFactory,
    MethodFactory,
)
from media_query.mapping.hydrator import ResultHydrator
from media_query.mapping.model import ModelMapper

__all__ = [
    "ResultHydrator",
    "ModelMapper",
    "FetchMode",
    "Default",
    "ClassHydration",
    "FunctionFactory",
    "MethodFactory",
]
