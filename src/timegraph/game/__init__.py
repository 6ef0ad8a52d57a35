"""Game glue: components, triggers, portals, lifetimes and the environment.

Importing this package registers the gameplay actions (SpawnPortalTo,
Spawn, Despawn, MovePlayer, FlipLever) in the global action registry.
"""

from timegraph.game.actions import Despawn, FlipLever, MovePlayer, Spawn, SpawnPortalTo
from timegraph.game.components import (
    DEFAULT_INTERACT_MESSAGE,
    EnvRoot,
    Hand,
    InteractInput,
    InteractSign,
    Lever,
    Lifetime,
    Overlaps,
    Player,
    PortalTo,
    Sensor,
    SpawnedAt,
    Text,
    Transform,
    Trigger,
    TriggerKind,
    Visibility,
)
from timegraph.game.environment import (
    INTRO_LEVER,
    reset_lever,
    setup_environment,
    setup_intro,
    setup_ui,
    spawn_environment,
)
from timegraph.game.lifetime import despawn_expired, tick_hand
from timegraph.game.triggers import clear_interact_input, enter_portals, run_triggers
from timegraph.timeloop.seek import Resettable
from timegraph.world import Name, Parent

__all__ = [
    # Components
    "EnvRoot",
    "Hand",
    "InteractSign",
    "Lever",
    "Lifetime",
    "Name",
    "Parent",
    "Player",
    "PortalTo",
    "Resettable",
    "Sensor",
    "SpawnedAt",
    "Text",
    "Transform",
    "Trigger",
    "TriggerKind",
    "Visibility",
    "DEFAULT_INTERACT_MESSAGE",
    # Resources
    "InteractInput",
    "Overlaps",
    # Systems
    "clear_interact_input",
    "despawn_expired",
    "enter_portals",
    "run_triggers",
    "tick_hand",
    # Setup
    "INTRO_LEVER",
    "reset_lever",
    "setup_environment",
    "setup_intro",
    "setup_ui",
    "spawn_environment",
    # Actions
    "Despawn",
    "FlipLever",
    "MovePlayer",
    "Spawn",
    "SpawnPortalTo",
]
