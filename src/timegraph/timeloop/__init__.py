"""The time graph: timelines, the loop cursor, stepping, seeking and time actions.

Architecture Note:
    models/loader/store hold content; state holds the single cursor;
    dispatch and seek are the two systems that move it. Importing this
    package registers the built-in time actions in the global registry.
"""

from timegraph.timeloop.actions import (
    JumpTo,
    Log,
    LogLevel,
    ModifyTimeline,
    MomentUpdate,
    ResetLoop,
    SetDisabled,
    TakeBranch,
    TimelineUpdate,
    jump_cursor,
)
from timegraph.timeloop.dispatch import dispatch_range, step_loop
from timegraph.timeloop.loader import TimelineLoader, timeline_id
from timegraph.timeloop.models import (
    At,
    Happenings,
    Labelled,
    Moment,
    MomentRef,
    Timeline,
)
from timegraph.timeloop.seek import (
    EnvironmentSpawners,
    Resettable,
    despawn_recursive,
    ease_speed,
    reset_world,
    seek_step,
)
from timegraph.timeloop.state import LoopState, TimeLoop, is_resetting, is_running
from timegraph.timeloop.store import Timelines

__all__ = [
    # Content
    "At",
    "Happenings",
    "Labelled",
    "Moment",
    "MomentRef",
    "Timeline",
    "TimelineLoader",
    "Timelines",
    "timeline_id",
    # Cursor
    "LoopState",
    "TimeLoop",
    "is_resetting",
    "is_running",
    # Systems
    "dispatch_range",
    "step_loop",
    "seek_step",
    "ease_speed",
    "reset_world",
    "EnvironmentSpawners",
    "Resettable",
    "despawn_recursive",
    # Actions
    "JumpTo",
    "Log",
    "LogLevel",
    "ModifyTimeline",
    "MomentUpdate",
    "ResetLoop",
    "SetDisabled",
    "TakeBranch",
    "TimelineUpdate",
    "jump_cursor",
]
