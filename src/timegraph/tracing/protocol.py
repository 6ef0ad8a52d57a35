"""History store protocol.

A history store keeps TickRecords so a run can be inspected after the fact:
which moments fired, what was skipped, when the loop reset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from timegraph.tracing.models import TickRecord


@runtime_checkable
class HistoryStore(Protocol):
    """Tick-indexed record storage. Implementations may be bounded.

    Usage:
        store = InMemoryHistoryStore(max_ticks=1000)
        world.insert_resource(TickTrace(store=store))

        # after a run
        resets = [e for e in store.get_events(0, 600) if e["type"] == "world_reset"]
    """

    def record_tick(self, record: TickRecord) -> None:
        """Store one tick. A bounded store may evict its oldest records."""
        ...

    def get_tick(self, tick: int) -> TickRecord | None: ...

    def get_events(self, start_tick: int, end_tick: int) -> list[dict[str, Any]]:
        """Events of every stored tick in ``[start_tick, end_tick]``, in order."""
        ...

    def get_tick_range(self) -> tuple[int, int] | None:
        """``(oldest, newest)`` stored tick, or None when empty."""
        ...

    def clear(self) -> None: ...

    @property
    def tick_count(self) -> int: ...
