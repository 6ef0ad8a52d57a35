"""Core functionalities: stateless protocols and primitives.

Architecture Note:
    core/ contains pure, stateless building blocks (ids, component and
    action registries, loop time, system descriptors). For stateful services,
    see world/, storage/, scheduling/ and timeloop/.
"""

from timegraph.core.action import (
    Action,
    ActionRegistry,
    action,
    clone_actions,
)
from timegraph.core.component import (
    ComponentInfo,
    ComponentRegistry,
    component,
)
from timegraph.core.identity import EntityId, SystemEntity
from timegraph.core.query import Query
from timegraph.core.system import Phase, SystemDescriptor, system
from timegraph.core.time import LoopTime, LoopTimeParseError, TimePoint
from timegraph.core.types import Copy

__all__ = [
    # Types
    "Copy",
    # Identity
    "EntityId",
    "SystemEntity",
    # Component
    "component",
    "ComponentInfo",
    "ComponentRegistry",
    # Action
    "Action",
    "ActionRegistry",
    "action",
    "clone_actions",
    # Time
    "LoopTime",
    "LoopTimeParseError",
    "TimePoint",
    # System
    "system",
    "SystemDescriptor",
    "Phase",
    # Query
    "Query",
]
