"""Lazy pagination over a SELECT template.

Nothing is queried when a ``Pages`` view is created. The total count and
each page slice run on first access and are memoized for the lifetime of
the view:

    pages = engine.paginate("todo.list", {}, per_page=10)
    pages.count()       # runs SELECT COUNT(*) ...          (once)
    pages[1].items      # runs ... LIMIT 10 OFFSET 0        (once per index)
    pages[1].has_next   # uses the cached count

A view is not safe for concurrent use from several threads.
"""

from __future__ import annotations

import html
import logging
import math
import re
from collections.abc import Iterator
from typing import Any

from media_query.core.connection import ConnectionManager
from media_query.core.exceptions import InvalidPagerConfiguration, StatementExecutionFailed
from media_query.core.params import normalize_params
from media_query.mapping.fetch_mode import FetchMode
from media_query.mapping.hydrator import ResultHydrator, cursor_columns, row_values

logger = logging.getLogger(__name__)

DEFAULT_URI_TEMPLATE = "/{?page}"

# Trailing "LIMIT n [OFFSET m]", "LIMIT m, n" or "OFFSET m" of the source query
_TRAILING_WINDOW = re.compile(
    r"\s+(?:LIMIT\s+[\w:]+(?:\s*,\s*[\w:]+)?(?:\s+OFFSET\s+[\w:]+)?|OFFSET\s+[\w:]+)\s*$",
    re.IGNORECASE,
)

_URI_PAGE_VARIABLES = (
    ("{?page}", "?page={}"),
    ("{&page}", "&page={}"),
    ("{page}", "{}"),
)

# Pages shown on each side of the current page in the navigation
_PROXIMITY = 2


def strip_window(sql: str) -> str:
    """Remove a trailing LIMIT/OFFSET clause from *sql*."""
    return _TRAILING_WINDOW.sub("", sql.strip().rstrip(";").rstrip())


def count_sql(sql: str) -> str:
    """Count query over every row *sql* selects, ignoring LIMIT/OFFSET."""
    return f"SELECT COUNT(*) AS total FROM ({strip_window(sql)}) AS media_query_count"


def slice_sql(sql: str, limit: int, offset: int) -> str:
    """Window of *limit* rows starting at *offset*."""
    return f"{strip_window(sql)} LIMIT {int(limit)} OFFSET {int(offset)}"


def resolve_per_page(per_page: int | str, params: dict[str, Any]) -> int:
    """Resolve items-per-page, given literally or as a parameter name.

    Raises:
        InvalidPagerConfiguration: If the parameter is absent, non-numeric
            or not a positive integer.
    """
    if isinstance(per_page, str):
        if per_page not in params:
            raise InvalidPagerConfiguration(f"per-page parameter '{per_page}' is not supplied")
        value = params[per_page]
    else:
        value = per_page

    if isinstance(value, bool):
        raise InvalidPagerConfiguration(f"per-page value {value!r} is not numeric")
    try:
        resolved = int(value)
    except (TypeError, ValueError):
        raise InvalidPagerConfiguration(f"per-page value {value!r} is not numeric") from None
    if resolved != value and not (isinstance(value, str) and value.strip().isdigit()):
        raise InvalidPagerConfiguration(f"per-page value {value!r} is not an integer")
    if resolved < 1:
        raise InvalidPagerConfiguration(f"per-page value must be positive, got {resolved}")
    return resolved


def expand_uri(uri_template: str, page: int) -> str:
    """Expand the page variable of a URI template, e.g. ``/todos{?page}``."""
    uri = uri_template
    for variable, replacement in _URI_PAGE_VARIABLES:
        uri = uri.replace(variable, replacement.format(page))
    return uri


def render_pager(current: int, total_pages: int, uri_template: str = DEFAULT_URI_TEMPLATE) -> str:
    """Render page navigation markup. Pure function of its arguments."""

    def link(page: int, label: str, rel: str | None = None) -> str:
        rel_attr = f' rel="{rel}"' if rel else ""
        href = html.escape(expand_uri(uri_template, page))
        return f'<a href="{href}"{rel_attr}>{html.escape(label)}</a>'

    total_pages = max(total_pages, 1)
    parts: list[str] = []

    if current > 1:
        parts.append(link(current - 1, "Previous", "prev"))
    else:
        parts.append('<span class="disabled">Previous</span>')

    first = max(1, current - _PROXIMITY)
    last = min(total_pages, current + _PROXIMITY)
    if first > 1:
        parts.append(link(1, "1"))
        if first > 2:
            parts.append('<span class="dots">...</span>')
    for page in range(first, last + 1):
        if page == current:
            parts.append(f'<span class="current">{page}</span>')
        else:
            parts.append(link(page, str(page)))
    if last < total_pages:
        if last < total_pages - 1:
            parts.append('<span class="dots">...</span>')
        parts.append(link(total_pages, str(total_pages)))

    if current < total_pages:
        parts.append(link(current + 1, "Next", "next"))
    else:
        parts.append('<span class="disabled">Next</span>')

    return '<nav class="pagination">' + "".join(parts) + "</nav>"


class Page:
    """One page of a ``Pages`` view.

    ``items`` is fetched when the page is created; ``total`` and everything
    derived from it read the view's memoized count.
    """

    def __init__(self, pages: Pages, current: int, items: list[Any]) -> None:
        self._pages = pages
        self.current = current
        self.items = items

    @property
    def per_page(self) -> int:
        return self._pages.per_page

    @property
    def total(self) -> int:
        return self._pages.count()

    @property
    def total_pages(self) -> int:
        return self._pages.total_pages()

    @property
    def has_next(self) -> bool:
        return self.current * self.per_page < self.total

    @property
    def has_previous(self) -> bool:
        return self.current > 1

    def render(self) -> str:
        return render_pager(self.current, self.total_pages, self._pages.uri_template)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Page(current={self.current}, items={len(self.items)}, per_page={self.per_page})"


class Pages:
    """Lazily evaluated, index-accessible pages of a SELECT statement.

    Args:
        connection_manager: Backend handle; one connection per query.
        sql: The SELECT statement text, with ``:name`` placeholders.
        params: Already normalized parameter set.
        per_page: Items per page, or the name of a key in *params*.
        hydrator: Hydrator applied to each page's rows.
        fetch_mode: Row representation; dicts when None.
        uri_template: URI template used by the navigation markup.
        template_id: Template id, for error messages.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        sql: str,
        params: dict[str, Any],
        per_page: int | str,
        hydrator: ResultHydrator,
        fetch_mode: FetchMode | None = None,
        uri_template: str = DEFAULT_URI_TEMPLATE,
        template_id: str = "<pager>",
    ) -> None:
        self._connection_manager = connection_manager
        self._sql = sql
        self._params = params
        self.per_page = resolve_per_page(per_page, params)
        self._hydrator = hydrator
        self._fetch_mode = fetch_mode
        self.uri_template = uri_template
        self.template_id = template_id
        self._count: int | None = None
        self._pages: dict[int, Page] = {}

    def count(self) -> int:
        """Total number of rows, computed by the backend on first access."""
        if self._count is None:
            _, rows = self._query(count_sql(self._sql))
            self._count = int(row_values(rows[0])[0]) if rows else 0
        return self._count

    def total_pages(self) -> int:
        return max(1, math.ceil(self.count() / self.per_page))

    def page(self, index: int) -> Page:
        """The 1-based page *index*, queried on first access."""
        if isinstance(index, bool) or not isinstance(index, int) or index < 1:
            raise InvalidPagerConfiguration(f"page index must be a positive integer, got {index!r}")

        if index not in self._pages:
            offset = (index - 1) * self.per_page
            columns, rows = self._query(slice_sql(self._sql, self.per_page, offset))
            items = self._hydrator.hydrate_rows(columns, rows, self._fetch_mode)
            self._pages[index] = Page(self, index, items)
        return self._pages[index]

    def _query(self, sql: str) -> tuple[list[str], list[Any]]:
        """Run *sql* on a borrowed connection and fetch every row."""
        adapter = self._connection_manager.adapter
        with self._connection_manager.get_connection() as conn:
            try:
                cursor = adapter.execute(conn, normalize_params(sql, adapter.paramstyle), self._params)
                return cursor_columns(cursor), cursor.fetchall()
            except Exception as e:
                conn.rollback()
                logger.debug("pager query for %s failed: %s", self.template_id, e)
                raise StatementExecutionFailed(str(e), self.template_id, self._params) from e

    def __getitem__(self, index: int) -> Page:
        return self.page(index)

    def __len__(self) -> int:
        return self.total_pages()

    def __iter__(self) -> Iterator[Page]:
        for index in range(1, self.total_pages() + 1):
            yield self.page(index)
