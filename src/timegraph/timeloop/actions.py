"""Built-in time actions: logging, branch switching, content patches, resets, jumps.

Content example::

    {"LABEL": "skip-puzzle",
     "ModifyTimeline": {"timelines": [
        {"timeline": "tl/area_1.tl.json",
         "updates": [{"moment": {"Labelled": "puzzle-intro"}, "disabled": true}]}
     ]},
     "ResetLoop": {"to": "0s"}}
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Literal

from pydantic import Field

from timegraph.core.action import ActionModel, action
from timegraph.core.time import LoopTime, TimePoint
from timegraph.timeloop.models import MomentRef
from timegraph.timeloop.state import TimeLoop
from timegraph.timeloop.store import Timelines
from timegraph.tracing import emit

if TYPE_CHECKING:
    from timegraph.world.world import World

logger = logging.getLogger(__name__)
happens = logging.getLogger("timegraph.happens")

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class LogLevel(str, Enum):
    TRACE = "Trace"
    DEBUG = "Debug"
    INFO = "Info"
    WARN = "Warn"
    ERROR = "Error"

    @property
    def level(self) -> int:
        return {
            LogLevel.TRACE: TRACE,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARN: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
        }[self]


@action("Log")
class Log(ActionModel):
    """Debugging happening: writes ``msg`` to the ``timegraph.happens`` logger."""

    level: LogLevel = LogLevel.INFO
    msg: str

    def apply(self, world: World) -> None:
        happens.log(self.level.level, "%s", self.msg)


def jump_cursor(world: World, target: TimePoint, source: str) -> bool:
    """Move the cursor instantly to ``target`` if its timeline is loaded.

    Returns:
        True if the cursor moved.
    """
    tloop = world.get_resource(TimeLoop)
    if tloop is None:
        return False
    timelines = world.get_resource(Timelines)
    if timelines is None or target.timeline not in timelines:
        logger.error("%s: target timeline %s is not loaded", source, target.timeline)
        return False
    previous = tloop.curr
    tloop.jump_to(target)
    logger.info("%s: jumped from %s to %s", source, previous, target)
    emit(world, "portal", source=source, origin=str(previous), target=str(target))
    return True


@action("TakeBranch")
class TakeBranch(ActionModel):
    """Switch the active timeline, keeping the current loop time."""

    timeline: str

    def apply(self, world: World) -> None:
        tloop = world.get_resource(TimeLoop)
        if tloop is None:
            return
        if tloop.is_resetting:
            logger.warning("TakeBranch to %s ignored while resetting", self.timeline)
            return
        timelines = world.get_resource(Timelines)
        if timelines is None or self.timeline not in timelines:
            logger.error("TakeBranch: timeline %s is not loaded", self.timeline)
            return
        logger.info("Taking branch %s at %s", self.timeline, tloop.time)
        tloop.curr = tloop.curr.on(self.timeline)


SetDisabled = bool | Literal["Toggle"]
"""New disabled state: ``true``, ``false`` or ``"Toggle"``."""


def apply_set_disabled(current: bool, change: SetDisabled) -> bool:
    return not current if change == "Toggle" else bool(change)


class MomentUpdate(ActionModel):
    moment: MomentRef
    disabled: SetDisabled | None = None
    happenings: dict[str, SetDisabled] = Field(default_factory=dict)


class TimelineUpdate(ActionModel):
    timeline: str
    updates: list[MomentUpdate] = Field(default_factory=list)


@action("ModifyTimeline")
class ModifyTimeline(ActionModel):
    """Enable or disable moments and happenings groups at run time.

    Missing timelines, moments and happenings labels are logged and skipped
    one by one; everything else in the patch still applies.
    """

    timelines: list[TimelineUpdate] = Field(default_factory=list)

    def apply(self, world: World) -> None:
        store = world.get_resource(Timelines)
        for patch in self.timelines:
            timeline = store.get(patch.timeline) if store is not None else None
            if timeline is None:
                logger.error("ModifyTimeline: timeline %s is not loaded", patch.timeline)
                continue
            for update in patch.updates:
                moment = timeline.get_moment_mut(update.moment)
                if moment is None:
                    logger.warning(
                        "ModifyTimeline: no moment %s in %s", update.moment, patch.timeline
                    )
                    continue
                if update.disabled is not None:
                    moment.disabled = apply_set_disabled(moment.disabled, update.disabled)
                for label, change in update.happenings.items():
                    group = moment.get_happenings(label)
                    if group is None:
                        logger.warning(
                            "ModifyTimeline: no happenings %r in moment %s of %s",
                            label,
                            update.moment,
                            patch.timeline,
                        )
                        continue
                    group.disabled = apply_set_disabled(group.disabled, change)


@action("ResetLoop")
class ResetLoop(ActionModel):
    """Seek the loop back (or forward) to ``to``, resetting the world on the way."""

    to: LoopTime = LoopTime.EPOCH

    def apply(self, world: World) -> None:
        tloop = world.get_resource(TimeLoop)
        if tloop is None:
            return
        if tloop.begin_reset(self.to):
            emit(world, "reset_begin", origin=tloop.resetting_from, target=self.to)


@action("JumpTo")
class JumpTo(ActionModel):
    """Instant cursor move, as a portal does. No easing, no world reset."""

    target: TimePoint

    def apply(self, world: World) -> None:
        tloop = world.get_resource(TimeLoop)
        if tloop is not None and tloop.is_resetting:
            logger.warning("JumpTo %s ignored while resetting", self.target)
            return
        jump_cursor(world, self.target, "JumpTo")
