"""Repository layer - query methods declared on repository classes."""

from __future__ import annotations

from media_query.repository.base import Repository, db_query

__all__ = [
    "Repository",
    "db_query",
]
