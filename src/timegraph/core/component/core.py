"""Component registry and decorator.

Only registered component types may be attached to ordinary entities;
resources on the WORLD entity are exempt.

Usage:
    @component
    @dataclass(slots=True)
    class SpawnedAt:
        time: LoopTime

    @component
    @dataclass
    class Lever:
        flipped: bool = False

    get_registry().name_of(Lever)  # "Lever"
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import is_dataclass
from typing import overload

from pydantic import BaseModel

from timegraph.core.component.models import ComponentInfo


class ComponentRegistry:
    """Process-local map between component types and their display names."""

    def __init__(self) -> None:
        self._by_type: dict[type, ComponentInfo] = {}
        self._by_name: dict[str, type] = {}

    def register(self, cls: type) -> ComponentInfo:
        """Register a component type. Registering twice returns the same info.

        Raises:
            TypeError: If the class is neither a dataclass nor a pydantic model.
        """
        info = self._by_type.get(cls)
        if info is not None:
            return info
        if not (is_dataclass(cls) or issubclass(cls, BaseModel)):
            raise TypeError(
                f"Component {cls.__name__} must be a dataclass or pydantic model. "
                f"Did you forget the @dataclass decorator?"
            )
        name = cls.__name__
        if name in self._by_name:
            name = f"{cls.__module__}.{cls.__qualname__}"
        info = ComponentInfo(name=name, type=cls)
        self._by_type[cls] = info
        self._by_name[name] = cls
        return info

    def info(self, cls: type) -> ComponentInfo | None:
        return self._by_type.get(cls)

    def is_component(self, cls: type) -> bool:
        return cls in self._by_type

    def name_of(self, cls: type) -> str:
        """Display name of a type; unregistered types get their class name."""
        info = self._by_type.get(cls)
        return info.name if info is not None else cls.__name__

    def lookup(self, name: str) -> type | None:
        """Component type registered under ``name``, or None."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return sorted(self._by_name)


_registry = ComponentRegistry()


def get_registry() -> ComponentRegistry:
    """Access the global component registry."""
    return _registry


@overload
def component(cls: type) -> type: ...


@overload
def component(cls: None = None) -> Callable[[type], type]: ...


def component(cls: type | None = None) -> type | Callable[[type], type]:
    """Register a dataclass or pydantic model as a component type.

    Usable bare (``@component``) or called (``@component()``). Apply it
    on top of ``@dataclass``.

    Raises:
        TypeError: If the class is neither a dataclass nor a pydantic model.
    """

    def decorator(c: type) -> type:
        _registry.register(c)
        return c

    if cls is None:
        return decorator
    return decorator(cls)
