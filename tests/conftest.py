"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from timegraph import LoopTime, TimeLoop, Timelines, World  # noqa: E402
from timegraph.core.action import ActionModel, ActionRegistry  # noqa: E402
from timegraph.timeloop import Happenings, Moment, Timeline  # noqa: E402
from timegraph.tracing import TickTrace  # noqa: E402


def t(text: str) -> LoopTime:
    """Shorthand for LoopTime.parse in tests."""
    return LoopTime.parse(text)


class Record(ActionModel):
    """Test action appending its tag to the world's FiredLog resource."""

    tag: str

    def apply(self, world) -> None:
        world.resource(FiredLog).fired.append(self.tag)


class FiredLog:
    def __init__(self) -> None:
        self.fired: list[str] = []


def moment(*tags: str, label: str | None = None, disabled: bool = False) -> Moment:
    """A moment with one happenings group recording each tag in order."""
    return Moment(
        label=label,
        happenings=[Happenings(actions=[Record(tag=tag) for tag in tags])],
        disabled=disabled,
    )


@pytest.fixture
def world():
    """Fresh World instance."""
    return World()


@pytest.fixture
def fired(world):
    """Resource collecting the tags of Record actions as they apply."""
    log = FiredLog()
    world.insert_resource(log)
    return log.fired


@pytest.fixture
def registry():
    """Registry with only the Record action, isolated from the global one."""
    reg = ActionRegistry()
    reg.register("Record", Record)
    return reg


@pytest.fixture
def loop_world(world, fired):
    """World with an empty Timelines store, a TimeLoop on `a` and a TickTrace.

    Returns a function adding timelines: ``add("a", Timeline(...))``.
    """
    timelines = Timelines()
    world.insert_resource(timelines)
    world.insert_resource(TimeLoop.starting_at("a"))
    world.insert_resource(TickTrace())

    def add(tl_id: str, timeline: Timeline) -> Timeline:
        timelines.add(tl_id, timeline)
        return timeline

    return add
