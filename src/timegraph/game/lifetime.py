"""Loop-time lifetimes and the clock hand."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from timegraph.core.system import Phase, system
from timegraph.game.components import Hand, Lifetime, SpawnedAt, Transform
from timegraph.timeloop import TimeLoop

if TYPE_CHECKING:
    from timegraph.world.world import World

logger = logging.getLogger(__name__)


@system(phase=Phase.POST_UPDATE)
def despawn_expired(world: World) -> None:
    """Remove entities whose lifetime has elapsed in loop time."""
    tloop = world.get_resource(TimeLoop)
    if tloop is None:
        return
    expired = [
        entity
        for entity, spawned, lifetime in world.query(SpawnedAt, Lifetime)
        if tloop.time - spawned.time >= lifetime.duration
    ]
    for entity in expired:
        logger.debug("Entity %s expired at %s: %s", entity, tloop.time, world.describe(entity))
        world.despawn(entity, recursive=True)


@system(phase=Phase.UPDATE)
def tick_hand(world: World) -> None:
    """One full turn of every clock hand per 60 s of loop time."""
    tloop = world.get_resource(TimeLoop)
    if tloop is None:
        return
    yaw = -math.tau * tloop.time.secs_f() / 60.0
    for _, xform, _ in world.query(Transform, Hand):
        xform.yaw = yaw
