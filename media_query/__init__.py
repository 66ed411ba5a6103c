"""MediaQuery - SQL templates executed by name, rows hydrated on the way out."""

from __future__ import annotations

from media_query.core.connection import ConnectionConfig, ConnectionManager
from media_query.core.engine import Engine, ExecutionResult
from media_query.core.exceptions import (
    AdapterError,
    ConnectionError,  # noqa: A004
    EmptyTemplate,
    ExecutionError,
    HydrationError,
    InvalidPagerConfiguration,
    MappingError,
    MediaQueryError,
    PagerError,
    StatementExecutionFailed,
    TemplateError,
    TemplateNotFound,
)
from media_query.core.injector import DependencyResolver, Injector
from media_query.core.logger import MediaQueryLogger, QueryLogger
from media_query.core.pages import Page, Pages, render_pager
from media_query.core.params import ParamConverter, ToScalar
from media_query.core.registry import SQLTemplateStore
from media_query.core.return_entity import (
    MethodDescriptor,
    NamedEntity,
    NoEntity,
    resolve,
    resolve_method,
)
from media_query.mapping.fetch_mode import (
    ClassHydration,
    Default,
    FetchMode,
    FunctionFactory,
    MethodFactory,
)
from media_query.mapping.hydrator import ResultHydrator
from media_query.repository.base import Repository, db_query

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    "ExecutionResult",
    # Templates
    "SQLTemplateStore",
    # Fetch modes & hydration
    "FetchMode",
    "Default",
    "ClassHydration",
    "FunctionFactory",
    "MethodFactory",
    "ResultHydrator",
    # Return entity resolution
    "MethodDescriptor",
    "NamedEntity",
    "NoEntity",
    "resolve",
    "resolve_method",
    # Pagination
    "Pages",
    "Page",
    "render_pager",
    # Collaborators
    "ParamConverter",
    "ToScalar",
    "MediaQueryLogger",
    "QueryLogger",
    "DependencyResolver",
    "Injector",
    # Repository
    "Repository",
    "db_query",
    # Exceptions
    "MediaQueryError",
    "TemplateError",
    "TemplateNotFound",
    "EmptyTemplate",
    "ExecutionError",
    "StatementExecutionFailed",
    "MappingError",
    "HydrationError",
    "PagerError",
    "InvalidPagerConfiguration",
    "AdapterError",
    "ConnectionError",
]
