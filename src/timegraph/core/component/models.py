"""Component models: what the world knows about a component type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ComponentInfo:
    """Registration record of a component type.

    ``name`` is the short class name unless another registered component
    already uses it, in which case it is the fully qualified name.
    """

    name: str
    type: type

    @property
    def qualified_name(self) -> str:
        return f"{self.type.__module__}.{self.type.__qualname__}"
