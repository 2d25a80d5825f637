"""
Binding registry.

Maps component type names (as they appear in host component manifests, e.g.
``bindings.redis``) to factories, so a host can build bindings by name.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..errors import UnknownBindingError
from ..logging import StructuredLogger
from .base import OutputBinding
from .redis import new_redis_binding

# Called as factory(logger, **options)
BindingFactory = Callable[..., OutputBinding]


class BindingRegistry:
    """Name -> factory lookup for output bindings."""

    def __init__(self) -> None:
        self._factories: dict[str, BindingFactory] = {}

    def register(self, name: str, factory: BindingFactory) -> None:
        self._factories[_normalize(name)] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str, logger: StructuredLogger | None = None, **options: Any) -> OutputBinding:
        """
        Build a binding by component type name.

        The ``bindings.`` prefix is optional and the lookup is case-insensitive.
        Extra keyword options (e.g. ``logging_config``) go to the factory.

        Raises:
            UnknownBindingError: If nothing is registered under ``name``.
        """
        factory = self._factories.get(_normalize(name))
        if factory is None:
            raise UnknownBindingError(name=name)
        return factory(logger, **options)


def _normalize(name: str) -> str:
    name = name.strip().lower()
    if name.startswith("bindings."):
        name = name[len("bindings."):]
    return name


default_registry = BindingRegistry()
default_registry.register("bindings.redis", new_redis_binding)


def create_output_binding(
    name: str,
    logger: StructuredLogger | None = None,
    **options: Any,
) -> OutputBinding:
    """Build a binding from the default registry."""
    return default_registry.create(name, logger, **options)


__all__ = ["BindingRegistry", "BindingFactory", "default_registry", "create_output_binding"]
