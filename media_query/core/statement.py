"""Statement classification.

Two representations of a statement are kept apart: the raw text sent to the
backend, and the comment-stripped text used only to decide whether the
statement returns rows.
"""

from __future__ import annotations

import re

# C-style block comments, including ones spanning several lines
_C_STYLE_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)

_DATA_RETURNING_KEYWORDS = ("select", "with")


def strip_comments(sql: str) -> str:
    """Remove ``/* ... */`` comments from *sql*."""
    return _C_STYLE_COMMENT.sub("", sql)


def is_data_returning(sql: str) -> bool:
    """Return True if *sql* is a SELECT or WITH statement."""
    text = strip_comments(sql).strip().lower()
    return text.startswith(_DATA_RETURNING_KEYWORDS)
