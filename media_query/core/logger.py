"""Query profiling.

The engine calls ``start()`` before running a template and
``log(template_id, params)`` once all of its statements succeeded.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from media_query.core.exceptions import render_params

logger = logging.getLogger(__name__)


class QueryLogger(Protocol):
    """Profiler/logger protocol."""

    def start(self) -> None: ...

    def log(self, template_id: str, params: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class QueryLogEntry:
    template_id: str
    params: dict[str, Any]
    elapsed_ms: float


@dataclass
class MediaQueryLogger:
    """Records each executed template with its parameters and elapsed time.

    Entries are kept in memory and also emitted at DEBUG level.
    """

    entries: list[QueryLogEntry] = field(default_factory=list)
    _started: float | None = field(default=None, init=False, repr=False)

    def start(self) -> None:
        self._started = time.perf_counter()

    def log(self, template_id: str, params: dict[str, Any]) -> None:
        elapsed_ms = 0.0
        if self._started is not None:
            elapsed_ms = (time.perf_counter() - self._started) * 1000
            self._started = None
        entry = QueryLogEntry(template_id, dict(params), elapsed_ms)
        self.entries.append(entry)
        logger.debug(
            "query %s executed in %.2f ms with values %s",
            template_id,
            elapsed_ms,
            render_params(entry.params),
        )

    def clear(self) -> None:
        self.entries.clear()

    def __str__(self) -> str:
        return "\n".join(
            f"query: {entry.template_id}({render_params(entry.params)}) {entry.elapsed_ms:.2f}ms"
            for entry in self.entries
        )
