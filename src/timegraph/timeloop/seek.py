"""Reset/seek controller.

While the loop is RESETTING the seek step, not the stepper, moves the
cursor: it eases from ``resetting_from`` towards ``resetting_to``, slow at
both ends and fastest halfway, and tears the world down and rebuilds it once,
when progress crosses ``reset_crossing``. Moments are not fired while
seeking; the stepper resumes from the target, so a moment exactly at the
target fires on the first step after the seek.

Usage:
    world.register_system(seek_step)
    world.insert_resource(EnvironmentSpawners([spawn_environment]))
    world.resource(TimeLoop).begin_reset(LoopTime.EPOCH)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from timegraph.config import TimeLoopSettings
from timegraph.core.component import component
from timegraph.core.identity import EntityId
from timegraph.core.system import Phase, system
from timegraph.core.time import LoopTime
from timegraph.timeloop.state import LoopState, TimeLoop, is_resetting
from timegraph.tracing import emit

if TYPE_CHECKING:
    from timegraph.world.world import World

time_graph = logging.getLogger("timegraph.time_graph")

ResetHook = Callable[["World", EntityId], None]
"""Per-entity reset behaviour: (world, entity) -> None."""


def despawn_recursive(world: World, entity: EntityId) -> None:
    """Default reset hook: remove the entity and its descendants."""
    world.despawn(entity, recursive=True)


@component
@dataclass
class Resettable:
    """Marks an entity that must be reinitialized when the loop resets."""

    on_reset: ResetHook = despawn_recursive


@dataclass
class EnvironmentSpawners:
    """Functions re-run after every world reset to rebuild the environment."""

    spawners: list[Callable[[World], None]] = field(default_factory=list)


def ease_speed(t: float) -> float:
    """Raised-cosine speed curve: 0 at t=0 and t=1, 1 at t=0.5."""
    return 0.5 + 0.5 * math.cos((t - 0.5) * math.tau)


def reset_world(world: World) -> None:
    """Run every Resettable entity's hook, then respawn the environment."""
    targets = [entity for entity, _ in world.query(Resettable)]
    for entity in targets:
        resettable = world.get(entity, Resettable)
        if resettable is None:
            # Already removed by an earlier hook (e.g. a parent's recursive despawn)
            continue
        resettable.on_reset(world, entity)
    spawners = world.get_resource(EnvironmentSpawners)
    if spawners is not None:
        for spawn in spawners.spawners:
            spawn(world)
    time_graph.info("World reset: %d resettable entities, environment respawned", len(targets))


@system(phase=Phase.PRE_UPDATE, run_if=is_resetting)
def seek_step(world: World) -> None:
    """Advance the seek by one tick."""
    tloop = world.resource(TimeLoop)
    settings = world.get_resource(TimeLoopSettings) or TimeLoopSettings()
    origin = tloop.resetting_from.millis
    target = tloop.resetting_to.millis
    span = target - origin
    if span == 0:
        time_graph.warning("Seek from %s to itself; back to running", tloop.resetting_to)
        _finish(world, tloop)
        return

    direction = 1 if span > 0 else -1
    current = tloop.time.millis
    t_before = (current - origin) / span
    dt = world.delta.millis
    step = round(dt * (1 + settings.peak_speedup * ease_speed(t_before)))
    if dt > 0:
        step = max(step, 1)
    new = current + direction * step
    if (new - target) * direction > 0:
        new = target
    tloop.curr = tloop.curr.at(LoopTime(new))
    t_after = (new - origin) / span

    if not tloop.reset_fired and t_before < settings.reset_crossing <= t_after:
        tloop.reset_fired = True
        emit(world, "world_reset", time=tloop.time, progress=t_after)
        reset_world(world)

    if new == target:
        _finish(world, tloop)


def _finish(world: World, tloop: TimeLoop) -> None:
    tloop.curr = tloop.curr.at(tloop.resetting_to)
    tloop.state = LoopState.RUNNING
    time_graph.info("Seek reached %s", tloop.curr)
    emit(world, "reset_end", timeline=tloop.timeline, time=tloop.time)
