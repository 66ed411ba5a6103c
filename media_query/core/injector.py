"""Dependency resolution for factory-based hydration.

``MethodFactory`` fetch modes may name a factory *class*; the engine asks a
resolver for a ready-to-use instance of it before hydration starts.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from media_query.core.exceptions import HydrationError


@runtime_checkable
class DependencyResolver(Protocol):
    """Resolver protocol: ``get_instance(cls) -> instance``."""

    def get_instance(self, cls: type) -> Any: ...


class Injector:
    """Minimal resolver with explicit bindings and cached instances.

    Args:
        bindings: Mapping of class to an instance, or to a zero-argument
            provider returning one. Unbound classes are constructed
            without arguments.
    """

    def __init__(self, bindings: dict[type, Any] | None = None) -> None:
        self._bindings: dict[type, Any] = dict(bindings or {})
        self._instances: dict[type, Any] = {}

    def bind(self, cls: type, instance_or_provider: Any) -> None:
        """Bind *cls* to an instance or provider, replacing any cached instance."""
        self._bindings[cls] = instance_or_provider
        self._instances.pop(cls, None)

    def get_instance(self, cls: type) -> Any:
        if cls in self._instances:
            return self._instances[cls]

        binding = self._bindings.get(cls)
        if binding is None:
            instance = self._construct(cls, cls)
        elif isinstance(binding, cls):
            instance = binding
        else:
            instance = self._construct(cls, binding)

        self._instances[cls] = instance
        return instance

    @staticmethod
    def _construct(cls: type, provider: Callable[[], Any]) -> Any:
        try:
            return provider()
        except TypeError as e:
            raise HydrationError(cls.__name__, f"cannot resolve factory instance: {e}") from e
