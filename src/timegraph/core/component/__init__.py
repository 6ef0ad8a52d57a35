"""Component functionality: registry, decorator and type info."""

from timegraph.core.component.core import (
    ComponentRegistry,
    component,
    get_registry,
)
from timegraph.core.component.models import ComponentInfo

__all__ = [
    "ComponentInfo",
    "ComponentRegistry",
    "component",
    "get_registry",
]
