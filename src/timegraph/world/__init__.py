"""World state management.

Architecture Note:
    world/ is a stateful service layer that coordinates entities, components,
    resources and systems. Unlike core/ (stateless functionalities), world/
    maintains runtime state and drives the per-tick execution model.
"""

from timegraph.world.components import Name, Parent
from timegraph.world.world import World

__all__ = [
    "World",
    "Name",
    "Parent",
]
