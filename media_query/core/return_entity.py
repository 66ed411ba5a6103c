"""Return entity resolution.

Decides, once per query method, whether rows are hydrated into an entity
class or returned as dicts. The decision is made from the declared return
annotation, falling back to the element type documented in the docstring
for collection returns:

    def list_todos(self) -> list[Todo]: ...      -> NamedEntity(Todo)
    def get_todo(self, id: str) -> Todo: ...     -> NamedEntity(Todo)

    def list_todos(self) -> list:
        ":rtype: list[Todo]"                        -> NamedEntity(Todo)

    def list_rows(self) -> list[dict]: ...       -> NoEntity
"""

from __future__ import annotations

import builtins
import collections.abc
import importlib
import inspect
import re
import types
import typing
from dataclasses import dataclass
from typing import Any, Union

# Generic containers whose single (or first) argument is the element type
_COLLECTION_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.Collection,
)

# Documented return shapes, e.g. "list[User]", "User[]", "array<User>",
# "iterable<int, User>", "Sequence[app.models.User]"
_DOC_GENERIC = re.compile(r"^\s*[\w.]+\s*[\[<]\s*(?:[\w.]+\s*,\s*)?([A-Za-z_][\w.]*)\s*(?:,\s*\.\.\.)?\s*[\]>]\s*$")
_DOC_ARRAY = re.compile(r"^\s*([\w.]+)\s*\[\]\s*$")

# Modules whose classes are values, never row entities
_SCALAR_MODULES = frozenset(
    {"builtins", "typing", "collections.abc", "datetime", "decimal", "uuid"}
)

_DOC_RETURN_PATTERNS = (
    re.compile(r":rtype:\s*(.+)"),
    re.compile(r"@return\s+(\S+)"),
    # Google style "Returns:" section, "list[User]: description" on the next line
    re.compile(r"Returns:\s*\n\s*([^\s:]+)"),
)


@dataclass(frozen=True)
class NoEntity:
    """Rows are returned as dicts."""


@dataclass(frozen=True)
class NamedEntity:
    """Rows are hydrated into ``entity``."""

    entity: type


HydrationTarget = Union[NoEntity, NamedEntity]


@dataclass(frozen=True)
class MethodDescriptor:
    """What is known about a query method's return shape.

    Attributes:
        return_type: Declared return annotation: a type, a parameterized
            generic, a type name, or None.
        documented_return: Return type text taken from the docstring.
    """

    return_type: Any = None
    documented_return: str | None = None


def is_entity_type(candidate: Any) -> bool:
    """True for user classes; builtins, None and typing constructs are not entities."""
    if not inspect.isclass(candidate):
        return False
    if candidate.__module__ in _SCALAR_MODULES:
        return False
    return typing.get_origin(candidate) is None


def locate_type(name: str, namespace: dict[str, Any] | None = None) -> type | None:
    """Find a class by name in *namespace* or by dotted import path."""
    name = name.strip()
    if namespace and name in namespace:
        found = namespace[name]
        return found if inspect.isclass(found) else None
    if hasattr(builtins, name):
        found = getattr(builtins, name)
        return found if inspect.isclass(found) else None

    module_name, _, attr = name.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    found = getattr(module, attr, None)
    return found if inspect.isclass(found) else None


def _as_type(annotation: Any, namespace: dict[str, Any] | None) -> Any:
    if isinstance(annotation, str):
        return locate_type(annotation, namespace)
    return annotation


def _element_type(annotation: Any) -> Any:
    """Element type of a parameterized collection annotation, if any."""
    origin = typing.get_origin(annotation)
    if origin not in _COLLECTION_ORIGINS:
        return None
    args = [arg for arg in typing.get_args(annotation) if arg is not Ellipsis]
    if not args:
        return None
    return args[-1] if origin is not tuple else args[0]


def unwrap_optional(annotation: Any) -> Any:
    """``User | None`` -> ``User``; other annotations are returned unchanged."""
    if typing.get_origin(annotation) not in (Union, types.UnionType):
        return annotation
    args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
    return args[0] if len(args) == 1 else annotation


def _documented_element(text: str) -> str | None:
    for pattern in (_DOC_GENERIC, _DOC_ARRAY):
        match = pattern.match(text)
        if match:
            return match.group(1)
    return None


def resolve(descriptor: MethodDescriptor, namespace: dict[str, Any] | None = None) -> HydrationTarget:
    """Resolve the hydration target for a method descriptor.

    1. A declared return type naming an entity class wins.
    2. Otherwise the element type of a declared collection return.
    3. Otherwise the element type of a documented collection return.
    4. Otherwise rows stay dicts.
    """
    declared = unwrap_optional(_as_type(descriptor.return_type, namespace))
    if is_entity_type(declared):
        return NamedEntity(declared)

    element = _as_type(_element_type(declared), namespace)
    if is_entity_type(element):
        return NamedEntity(element)

    # Unevaluated string annotations are read like documentation
    texts = [descriptor.documented_return]
    if isinstance(descriptor.return_type, str):
        texts.insert(0, descriptor.return_type)
    for text in texts:
        element_name = _documented_element(text) if text else None
        if element_name is None:
            continue
        documented = locate_type(element_name, namespace)
        if is_entity_type(documented):
            return NamedEntity(documented)

    return NoEntity()


def documented_return(func: Any) -> str | None:
    """Return type text from the docstring of *func*, if documented."""
    doc = inspect.getdoc(func)
    if not doc:
        return None
    for pattern in _DOC_RETURN_PATTERNS:
        match = pattern.search(doc)
        if match:
            return match.group(1).strip().rstrip(":")
    return None


def describe(func: Any) -> MethodDescriptor:
    """Build a MethodDescriptor from a function's annotations and docstring."""
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        # Forward references that cannot be evaluated yet
        hints = dict(getattr(func, "__annotations__", {}))
    return MethodDescriptor(
        return_type=hints.get("return"),
        documented_return=documented_return(func),
    )


def resolve_method(func: Any) -> HydrationTarget:
    """Resolve the hydration target of a query method."""
    return resolve(describe(func), getattr(func, "__globals__", None))
