"""Gameplay actions: spawn and despawn things, move the player, flip levers."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

from pydantic import Field

from timegraph.core.action import ActionModel, action
from timegraph.core.time import LoopTime, TimePoint
from timegraph.game.components import (
    Lever,
    Lifetime,
    Player,
    PortalTo,
    Sensor,
    SpawnedAt,
    Transform,
)
from timegraph.timeloop import Resettable, TimeLoop
from timegraph.world import Name

if TYPE_CHECKING:
    from timegraph.world.world import World

logger = logging.getLogger(__name__)


@action("SpawnPortalTo")
class SpawnPortalTo(ActionModel):
    """Spawn a portal sensor that sends the player to ``target`` on overlap."""

    target: TimePoint
    radius: float = Field(default=0.5, gt=0)
    transform: Transform = Field(default_factory=Transform)

    def apply(self, world: World) -> None:
        entity = world.spawn(
            Transform(**asdict(self.transform)),
            Sensor(self.radius),
            PortalTo(self.target),
            Resettable(),
        )
        logger.debug("Spawned portal %s to %s", entity, self.target)


@action("Spawn")
class Spawn(ActionModel):
    """Spawn a named, resettable object, optionally with a loop-time lifetime."""

    name: str
    transform: Transform = Field(default_factory=Transform)
    lifetime: LoopTime | None = None

    def apply(self, world: World) -> None:
        tloop = world.get_resource(TimeLoop)
        now = tloop.time if tloop is not None else LoopTime.EPOCH
        components: list[object] = [
            Name(self.name),
            Transform(**asdict(self.transform)),
            SpawnedAt(now),
            Resettable(),
        ]
        if self.lifetime is not None:
            components.append(Lifetime(self.lifetime))
        world.spawn(*components)


@action("Despawn")
class Despawn(ActionModel):
    name: str
    recursive: bool = True

    def apply(self, world: World) -> None:
        entity = world.find_named(self.name)
        if entity is None:
            logger.warning("Despawn: no entity named %r", self.name)
            return
        world.despawn(entity, recursive=self.recursive)


@action("MovePlayer")
class MovePlayer(ActionModel):
    transform: Transform

    def apply(self, world: World) -> None:
        found = world.single(Player, Transform)
        if found is None:
            logger.warning("MovePlayer: no player to move")
            return
        _, _, xform = found
        xform.x, xform.y, xform.z, xform.yaw = (
            self.transform.x,
            self.transform.y,
            self.transform.z,
            self.transform.yaw,
        )


@action("FlipLever")
class FlipLever(ActionModel):
    name: str = "IntroLever"

    def apply(self, world: World) -> None:
        for _, name, lever in world.query(Name, Lever):
            if name.value == self.name:
                lever.flipped = not lever.flipped
                logger.info("Lever %s flipped %s", self.name, "on" if lever.flipped else "off")
                return
        logger.error("Failed to find lever %s", self.name)
