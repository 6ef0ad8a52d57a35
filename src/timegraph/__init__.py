"""timegraph: a looping, branchable timeline scheduler on a small ECS.

Usage:
    from timegraph import LoopTime, TimeLoopSettings, build_world

    world = build_world(TimeLoopSettings(content_dir="assets"))
    world.tick(1 / 60)

    tloop = world.resource(TimeLoop)
    print(tloop.curr)
"""

from timegraph.app import build_world, load_timelines
from timegraph.config import TimeLoopSettings, configure_logging
from timegraph.core import (
    Action,
    ActionRegistry,
    EntityId,
    LoopTime,
    Phase,
    Query,
    TimePoint,
    action,
    component,
    system,
)
from timegraph.errors import ContentError, TimegraphError
from timegraph.timeloop import (
    At,
    Happenings,
    Labelled,
    LoopState,
    Moment,
    Timeline,
    TimelineLoader,
    Timelines,
    TimeLoop,
)
from timegraph.world import World

__version__ = "0.1.0"

__all__ = [
    # Bootstrap
    "build_world",
    "load_timelines",
    "TimeLoopSettings",
    "configure_logging",
    # Core
    "Action",
    "ActionRegistry",
    "EntityId",
    "LoopTime",
    "Phase",
    "Query",
    "TimePoint",
    "action",
    "component",
    "system",
    # World
    "World",
    # Time graph
    "At",
    "Happenings",
    "Labelled",
    "LoopState",
    "Moment",
    "Timeline",
    "TimelineLoader",
    "Timelines",
    "TimeLoop",
    # Errors
    "ContentError",
    "TimegraphError",
]
