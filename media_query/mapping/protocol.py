"""Mapper protocol.

All row mappers implement this interface. The hydrator resolves one mapper
per fetch and calls ``map_row`` once per result row.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class Mapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_row(self, columns: Sequence[str], values: Sequence[Any]) -> T_co:
        """Map one row, given its column names and values in column order."""
        ...
