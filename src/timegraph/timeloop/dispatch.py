"""Per-tick stepping and recursive dispatch across branch/merge links.

Each tick the stepper advances the cursor by the world delta and fires every
moment in the half-open range ``[prev, new)``. A moment landed on exactly by
a reset is therefore fired on the next step, and a moment on a tick
boundary fires exactly once.

Firing order within a range:
    1. history inherited through ``branch_from`` (before the branch point),
    2. local moments, ascending; happenings and actions in declaration order,
    3. the continuation through ``merge_into`` (from the merge point on).

An action that jumps the cursor or begins a reset ends the step: nothing
after it in the range fires. ``TakeBranch`` keeps the time and does not.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from timegraph.core.system import Phase, system
from timegraph.core.time import LoopTime
from timegraph.timeloop.models import Timeline
from timegraph.timeloop.state import TimeLoop, is_running
from timegraph.timeloop.store import Timelines
from timegraph.tracing import emit

if TYPE_CHECKING:
    from timegraph.world.world import World

time_graph = logging.getLogger("timegraph.time_graph")


@system(phase=Phase.PRE_UPDATE, run_if=is_running)
def step_loop(world: World) -> None:
    """Advance the cursor by this tick's delta and fire what was crossed."""
    tloop = world.resource(TimeLoop)
    prev = tloop.time
    new = prev + world.delta
    tloop.curr = tloop.curr.at(new)
    mark = (tloop.jumps, tloop.state)

    def moved_away() -> bool:
        return (tloop.jumps, tloop.state) != mark

    dispatch_range(world, tloop.timeline, prev, new, interrupted=moved_away)
    if moved_away():
        time_graph.debug(
            "Cursor moved to %s by an action; rest of [%s, %s) dropped", tloop.curr, prev, new
        )
        emit(world, "interrupted", timeline=tloop.timeline, time=tloop.time)


def dispatch_range(
    world: World,
    timeline_id: str,
    start: LoopTime,
    end: LoopTime,
    visited: frozenset[str] = frozenset(),
    interrupted: Callable[[], bool] | None = None,
) -> None:
    """Fire every enabled moment of a timeline in ``[start, end)``.

    Args:
        world: World actions are applied to.
        timeline_id: Timeline to dispatch.
        start: Inclusive lower bound.
        end: Exclusive upper bound.
        visited: Timelines already on the current recursion path.
        interrupted: Checked before every moment and link; once it returns
            True the rest of the range is dropped.
    """
    if end <= start:
        return
    timelines = world.get_resource(Timelines)
    timeline = timelines.get(timeline_id) if timelines is not None else None
    if timeline is None:
        time_graph.error("Timeline %s is not loaded; skipping [%s, %s)", timeline_id, start, end)
        emit(world, "missing_timeline", timeline=timeline_id, start=start, end=end)
        return
    if timeline_id in visited:
        time_graph.warning(
            "Link cycle through %s; skipping [%s, %s) (path: %s)",
            timeline_id,
            start,
            end,
            ", ".join(sorted(visited)),
        )
        emit(world, "cycle", timeline=timeline_id, start=start, end=end)
        return
    path = visited | {timeline_id}

    lo, hi = start, end
    branch = timeline.branch_from
    if branch is not None and start < branch.time:
        if branch.time <= end:
            time_graph.debug("%s: crossing branch point %s", timeline_id, branch)
            emit(world, "branch", timeline=timeline_id, source=branch.timeline, time=branch.time)
        dispatch_range(world, branch.timeline, start, min(end, branch.time), path, interrupted)
        lo = max(start, branch.time)
        if _stopped(interrupted):
            return

    merge = timeline.merge_into
    if merge is not None and end <= merge.time:
        merge = None
    if merge is not None:
        hi = min(end, merge.time)

    if not _fire_moments(world, timeline_id, timeline, lo, hi, interrupted):
        return

    if merge is not None:
        if start <= merge.time:
            time_graph.debug("%s: crossing merge point %s", timeline_id, merge)
            emit(world, "merge", timeline=timeline_id, target=merge.timeline, time=merge.time)
        dispatch_range(world, merge.timeline, max(start, merge.time), end, path, interrupted)


def _stopped(interrupted: Callable[[], bool] | None) -> bool:
    return interrupted is not None and interrupted()


def _fire_moments(
    world: World,
    timeline_id: str,
    timeline: Timeline,
    lo: LoopTime,
    hi: LoopTime,
    interrupted: Callable[[], bool] | None,
) -> bool:
    """Fire local moments in ``[lo, hi)``. Returns False if the step was interrupted."""
    for time, moment in timeline.range(lo, hi):
        if _stopped(interrupted):
            return False
        label = moment.label or ""
        if moment.disabled:
            time_graph.info("%s: %s@%s is disabled, skipping", timeline_id, label, time)
            emit(world, "moment_skipped", timeline=timeline_id, time=time, label=moment.label)
            continue
        time_graph.debug("%s: %s@%s %s", timeline_id, label, time, moment.desc or "")
        emit(world, "moment", timeline=timeline_id, time=time, label=moment.label)
        for index, group in enumerate(list(moment.happenings)):
            if group.disabled:
                time_graph.info(
                    "%s: %s@%s happenings %r is disabled, skipping",
                    timeline_id,
                    label,
                    time,
                    group.label,
                )
                emit(
                    world,
                    "happenings_skipped",
                    timeline=timeline_id,
                    time=time,
                    label=group.label,
                    index=index,
                )
                continue
            emit(
                world, "happenings", timeline=timeline_id, time=time, label=group.label, index=index
            )
            for act in list(group.actions):
                time_graph.debug("%r", act)
                act.apply(world)
    return not _stopped(interrupted)
