"""Environment, intro scene and UI setup.

Usage:
    world.insert_resource(EnvironmentSpawners([spawn_environment]))
    world.register_systems(setup_environment, setup_intro, setup_ui)
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from timegraph.core.system import system
from timegraph.game.components import (
    DEFAULT_INTERACT_MESSAGE,
    EnvRoot,
    Hand,
    InteractSign,
    Lever,
    Player,
    Sensor,
    Text,
    Transform,
    Trigger,
    Visibility,
)
from timegraph.timeloop import EnvironmentSpawners, Resettable
from timegraph.world import Name, Parent

if TYPE_CHECKING:
    from timegraph.core.identity import EntityId
    from timegraph.world.world import World

logger = logging.getLogger(__name__)

INTRO_LEVER = "IntroLever"

# Static blocks, the back and side panels, the orb and the clock anchor.
_ENVIRONMENT: tuple[tuple[str | None, Transform], ...] = (
    (None, Transform(0.0, 0.0, 0.0)),
    (None, Transform(1.0, 0.0, -0.5)),
    (None, Transform(2.0, 0.0, -0.75)),
    (None, Transform(3.0, 0.0, -0.875)),
    ("BackPanel", Transform(0.0, 0.0, -1.0)),
    ("TopPanel", Transform(0.0, 8.5, 6.5)),
    ("LeftPanel", Transform(-7.5, 0.0, 6.5, math.pi / 2)),
    ("RightPanel", Transform(7.5, 0.0, 6.5, math.pi / 2)),
    ("BottomPanel", Transform(0.0, -8.5, 6.5)),
    ("Orb", Transform(0.0, 0.0, 0.8)),
)

INTRO_LEVER_TRIGGER = {
    "kind": {"Interact": {"message": "Pull the lever"}},
    "causes": {"FlipLever": {"name": INTRO_LEVER}},
}


def spawn_environment(world: World) -> None:
    """Spawn the resettable environment pieces, clock included."""
    for name, xform in _ENVIRONMENT:
        parts: list[object] = [
            Transform(xform.x, xform.y, xform.z, xform.yaw),
            EnvRoot(),
            Resettable(),
        ]
        if name is not None:
            parts.append(Name(name))
        world.spawn(*parts)

    anchor = world.spawn(Name("Clock"), Transform(0.0, -0.6, 0.0), EnvRoot(), Resettable())
    world.spawn(Name("ClockHand"), Transform(), Hand(), Parent(anchor))
    logger.debug("Spawned environment (%d pieces and the clock)", len(_ENVIRONMENT))


@system.startup()
def setup_environment(world: World) -> None:
    """First tick: run every environment spawner once."""
    spawners = world.get_resource(EnvironmentSpawners)
    if spawners is None:
        return
    for spawn in spawners.spawners:
        spawn(world)


def reset_lever(world: World, entity: EntityId) -> None:
    """Levers survive resets; only their state goes back."""
    world.set(entity, Lever(flipped=False))


@system.startup()
def setup_intro(world: World) -> None:
    """Intro room: walls, the player and the intro lever."""
    walls = world.spawn(Name("Walls"), Transform())
    for xform in (
        Transform(0.0, 6.5, 4.5),
        Transform(-5.5, 0.0, 4.5, math.pi / 2),
        Transform(5.5, 0.0, 4.5, math.pi / 2),
        Transform(0.0, -6.5, 4.5),
    ):
        world.spawn(xform, Parent(walls))

    if world.single(Player) is None:
        world.spawn(Name("Player"), Player(), Transform(0.0, 0.0, 1.0), Sensor(0.3))

    world.spawn(
        Name(INTRO_LEVER),
        Lever(),
        Transform(-2.0, 0.0, 0.5),
        Sensor(0.75),
        Trigger.from_content(INTRO_LEVER_TRIGGER),
        Resettable(on_reset=reset_lever),
    )


@system.startup()
def setup_ui(world: World) -> None:
    """Hidden interact prompt, shown by run_triggers."""
    world.spawn(InteractSign(), Text(DEFAULT_INTERACT_MESSAGE), Visibility(False))
