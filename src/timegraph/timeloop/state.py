"""TimeLoop: the single mutable cursor of the time graph.

Usage:
    tloop = TimeLoop.starting_at("tl/intro.tl.json")
    world.insert_resource(tloop)

    tloop.jump_to(TimePoint("tl/area_1.tl.json", LoopTime.EPOCH))
    tloop.begin_reset(LoopTime.EPOCH)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from timegraph.core.time import LoopTime, TimePoint

if TYPE_CHECKING:
    from timegraph.world.world import World

time_graph = logging.getLogger("timegraph.time_graph")


class LoopState(Enum):
    """Who owns cursor advancement: the stepper or the seek controller."""

    RUNNING = auto()
    RESETTING = auto()


@dataclass
class TimeLoop:
    """Active timeline, current loop time and the pending seek, if any.

    ``resetting_from`` and ``resetting_to`` are meaningful only while
    ``state`` is RESETTING; ``reset_fired`` records whether the world-reset
    callback already ran during the current seek. ``jumps`` counts instant
    cursor moves, so a step can tell that an action moved the cursor away.
    """

    curr: TimePoint
    resetting_from: LoopTime = LoopTime.EPOCH
    resetting_to: LoopTime = LoopTime.EPOCH
    state: LoopState = LoopState.RUNNING
    reset_fired: bool = False
    jumps: int = 0

    @classmethod
    def starting_at(cls, timeline: str, time: LoopTime = LoopTime.EPOCH) -> TimeLoop:
        return cls(curr=TimePoint(timeline, time))

    @property
    def timeline(self) -> str:
        return self.curr.timeline

    @property
    def time(self) -> LoopTime:
        return self.curr.time

    @property
    def is_resetting(self) -> bool:
        return self.state is LoopState.RESETTING

    def jump_to(self, point: TimePoint) -> None:
        """Move the cursor instantly. No easing, no world reset."""
        self.curr = point
        self.jumps += 1

    def begin_reset(self, to: LoopTime) -> bool:
        """Start seeking from the current time towards ``to``.

        Returns:
            True if the seek started. A request while already resetting is
            rejected, and a request for the current time is a no-op; both
            are logged as warnings.
        """
        if self.is_resetting:
            time_graph.warning(
                "Reset to %s requested while already resetting to %s; ignored",
                to,
                self.resetting_to,
            )
            return False
        if to == self.curr.time:
            time_graph.warning("Reset target %s equals the current time; nothing to seek", to)
            return False
        self.resetting_from = self.curr.time
        self.resetting_to = to
        self.state = LoopState.RESETTING
        self.reset_fired = False
        time_graph.info("Resetting loop from %s to %s", self.resetting_from, to)
        return True

    def progress(self) -> float:
        """Seek progress in [0, 1]. Outside a seek this is 1.0."""
        span = self.resetting_to.millis - self.resetting_from.millis
        if not self.is_resetting or span == 0:
            return 1.0
        t = (self.curr.time.millis - self.resetting_from.millis) / span
        return min(max(t, 0.0), 1.0)


def is_running(world: World) -> bool:
    """Run condition: the stepper owns the cursor."""
    tloop = world.get_resource(TimeLoop)
    return tloop is not None and tloop.state is LoopState.RUNNING


def is_resetting(world: World) -> bool:
    """Run condition: the seek controller owns the cursor."""
    tloop = world.get_resource(TimeLoop)
    return tloop is not None and tloop.state is LoopState.RESETTING
