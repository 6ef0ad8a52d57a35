"""Trigger and portal systems: spatial, not time-indexed.

Both read the externally supplied Overlaps resource. Triggers dispatch their
causes through the same action mechanism as timelines; portals move the
loop cursor directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from timegraph.core.system import Phase, system
from timegraph.game.components import (
    InteractInput,
    InteractSign,
    Overlaps,
    Player,
    PortalTo,
    Text,
    Trigger,
    Visibility,
)
from timegraph.timeloop import is_running, jump_cursor

if TYPE_CHECKING:
    from timegraph.core.identity import EntityId
    from timegraph.world.world import World

logger = logging.getLogger(__name__)


@system(phase=Phase.UPDATE)
def run_triggers(world: World) -> None:
    """Fire triggers overlapping the player and drive the interact prompt."""
    found = world.single(Player)
    if found is None:
        return
    player = found[0]
    overlaps = world.get_resource(Overlaps) or Overlaps()
    interact = world.get_resource(InteractInput)
    pressed = interact is not None and interact.just_pressed

    prompt: str | None = None
    for entity, trigger in list(world.query(Trigger)):
        if not world.exists(entity) or not overlaps.overlapping(entity, player):
            continue
        if trigger.kind.is_interact:
            if prompt is None:
                prompt = trigger.kind.message
            if not pressed:
                continue
        _fire(world, entity, trigger)

    _show_prompt(world, prompt)


def _fire(world: World, entity: EntityId, trigger: Trigger) -> None:
    logger.debug("Trigger %s fired (%s)", entity, trigger.kind.kind)
    for cause in list(trigger.causes):
        cause.apply(world)
    if trigger.oneshot:
        world.despawn(entity, recursive=True)


def _show_prompt(world: World, prompt: str | None) -> None:
    sign = world.single(InteractSign, Text, Visibility)
    if sign is None:
        return
    _, _, text, visibility = sign
    if prompt is not None:
        text.value = prompt
    visibility.visible = prompt is not None


@system(phase=Phase.UPDATE, run_if=is_running)
def enter_portals(world: World) -> None:
    """Jump the cursor to the first portal the player overlaps."""
    found = world.single(Player)
    overlaps = world.get_resource(Overlaps)
    if found is None or overlaps is None:
        return
    player = found[0]
    for entity, portal in world.query(PortalTo):
        if overlaps.overlapping(entity, player):
            jump_cursor(world, portal.target, f"portal {entity}")
            return


@system(phase=Phase.POST_UPDATE)
def clear_interact_input(world: World) -> None:
    """End of tick: an interact press is an edge, seen for one tick only."""
    interact = world.get_resource(InteractInput)
    if interact is not None:
        interact.just_pressed = False
