"""MediaQuery exception hierarchy.

All exceptions are MediaQuery-specific. Raw driver exceptions never escape
the engine unwrapped; they are chained as ``__cause__``.
"""

from __future__ import annotations

import json
from typing import Any


class MediaQueryError(Exception):
    """Base exception for all MediaQuery errors."""


# --- Templates ---


class TemplateError(MediaQueryError):
    """Base for SQL template errors."""


class TemplateNotFound(TemplateError):
    """Raised when a template id has no backing .sql file."""

    def __init__(self, template_id: str, path: str | None = None) -> None:
        self.template_id = template_id
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"SQL template not found: '{template_id}'{location}")


class EmptyTemplate(TemplateError):
    """Raised when a template file holds no usable statement."""

    def __init__(self, template_id: str, path: str | None = None) -> None:
        self.template_id = template_id
        self.path = path
        super().__init__(f"SQL template '{template_id}' contains no statement")


# --- Execution ---


class ExecutionError(MediaQueryError):
    """Base for query execution errors."""


class StatementExecutionFailed(ExecutionError):
    """Raised when the backend rejects a statement of a template.

    The message keeps the backend error text, the template id and the
    parameter set rendered as JSON.
    """

    def __init__(self, detail: str, template_id: str, params: dict[str, Any]) -> None:
        self.detail = detail
        self.template_id = template_id
        self.params = params
        super().__init__(
            f"{detail} in {template_id}.sql with values {render_params(params)}"
        )


def render_params(params: dict[str, Any]) -> str:
    """Render a parameter set as JSON for diagnostics."""
    return json.dumps(params, default=str, ensure_ascii=False)


# --- Mapping ---


class MappingError(MediaQueryError):
    """Base for hydration errors."""


class HydrationError(MappingError):
    """Raised when a row cannot be turned into the requested representation."""

    def __init__(self, target: str, detail: str) -> None:
        self.target = target
        self.detail = detail
        super().__init__(f"Cannot hydrate {target}: {detail}")


# --- Pagination ---


class PagerError(MediaQueryError):
    """Base for pagination errors."""


class InvalidPagerConfiguration(PagerError):
    """Raised when items-per-page or a page index cannot be resolved."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid pager configuration: {detail}")


# --- Adapter ---


class AdapterError(MediaQueryError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""
