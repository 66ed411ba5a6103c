"""SQL parameter handling.

* ``normalize_params`` converts ``:name`` parameter syntax to the
  driver-specific format, skipping string literals and PostgreSQL
  ``::typecast`` syntax.
* ``ParamConverter`` reduces domain values (dates, enums, UUIDs, value
  objects) to bind-ready scalars and fills in registered defaults.
"""

from __future__ import annotations

import datetime
import re
import uuid
from collections.abc import Callable
from enum import Enum
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:]))

    return "".join(parts)


@runtime_checkable
class ToScalar(Protocol):
    """Value object that knows its own bind-ready representation."""

    def to_scalar(self) -> Any: ...


class ParamConverter:
    """Normalizes a parameter mapping in place.

    Conversion rules, applied per value:

    * ``datetime`` -> ``"YYYY-MM-DD HH:MM:SS"``; ``date`` / ``time`` -> ISO format
    * ``Enum`` -> its ``value``
    * ``UUID`` -> ``str``
    * objects with ``to_scalar()`` -> its return value

    Args:
        defaults: Factories for parameters that are absent or ``None``,
            e.g. ``{"created_at": datetime.datetime.now, "id": uuid.uuid4}``.
            Defaults are converted like supplied values.
    """

    def __init__(self, defaults: dict[str, Callable[[], Any]] | None = None) -> None:
        self._defaults = dict(defaults or {})

    def __call__(self, params: dict[str, Any]) -> None:
        for name, factory in self._defaults.items():
            if params.get(name) is None:
                params[name] = factory()

        for name, value in params.items():
            params[name] = self.convert(value)

    @staticmethod
    def convert(value: Any) -> Any:
        """Reduce a single value to a scalar the drivers can bind."""
        if isinstance(value, datetime.datetime):
            return value.strftime(DATETIME_FORMAT)
        if isinstance(value, (datetime.date, datetime.time)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, ToScalar):
            return value.to_scalar()
        return value
