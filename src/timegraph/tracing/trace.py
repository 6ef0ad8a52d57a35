"""Per-tick event buffer and the system that flushes it into history.

Usage:
    world.insert_resource(TickTrace(store=InMemoryHistoryStore()))
    world.register_system(record_history)

    # anywhere during the tick
    emit(world, "moment", timeline="tl/intro.tl.json", time=LoopTime.parse("5s"))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from timegraph.core.system import Phase, system
from timegraph.core.time import LoopTime
from timegraph.tracing.models import TickRecord
from timegraph.tracing.protocol import HistoryStore

if TYPE_CHECKING:
    from timegraph.world.world import World


@dataclass
class TickTrace:
    """Events recorded during the current tick.

    Event types: ``moment``, ``moment_skipped``, ``happenings``,
    ``happenings_skipped``, ``branch``, ``merge``, ``missing_timeline``,
    ``cycle``, ``reset_begin``, ``world_reset``, ``reset_end``, ``portal``.
    """

    events: list[dict[str, Any]] = field(default_factory=list)
    store: HistoryStore | None = None

    def emit(self, kind: str, **fields: Any) -> None:
        """Append an event. LoopTime values are stored in text form."""
        event: dict[str, Any] = {"type": kind}
        for key, value in fields.items():
            event[key] = str(value) if isinstance(value, LoopTime) else value
        self.events.append(event)

    def of_type(self, kind: str) -> list[dict[str, Any]]:
        return [e for e in self.events if e["type"] == kind]

    def drain(self) -> list[dict[str, Any]]:
        """Return the buffered events and start a fresh buffer."""
        events, self.events = self.events, []
        return events


def emit(world: World, kind: str, **fields: Any) -> None:
    """Record an event on the world's TickTrace, if it has one."""
    trace = world.get_resource(TickTrace)
    if trace is not None:
        trace.emit(kind, **fields)


@system(phase=Phase.POST_UPDATE)
def record_history(world: World) -> None:
    """Flush this tick's events into the attached history store."""
    from timegraph.timeloop.state import TimeLoop

    trace = world.get_resource(TickTrace)
    if trace is None:
        return
    events = trace.drain()
    if trace.store is None:
        return
    tloop = world.get_resource(TimeLoop)
    trace.store.record_tick(
        TickRecord(
            tick=world.tick_count,
            loop_time=str(tloop.time) if tloop else "",
            timeline=tloop.timeline if tloop else "",
            state=tloop.state.name if tloop else "",
            events=events,
        )
    )
