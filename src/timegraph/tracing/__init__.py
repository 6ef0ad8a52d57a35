"""Tracing infrastructure for recording what the time graph dispatched.

Usage:
    from timegraph.tracing import InMemoryHistoryStore, TickTrace

    store = InMemoryHistoryStore(max_ticks=1000)
    world.insert_resource(TickTrace(store=store))
    world.register_system(record_history)

    # after some ticks
    store.get_events(start_tick=0, end_tick=10)
"""

from timegraph.tracing.memory import InMemoryHistoryStore
from timegraph.tracing.models import TickRecord
from timegraph.tracing.protocol import HistoryStore
from timegraph.tracing.trace import TickTrace, emit, record_history

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "TickRecord",
    "TickTrace",
    "emit",
    "record_history",
]
