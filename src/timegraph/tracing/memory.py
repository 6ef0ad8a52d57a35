"""Bounded in-memory history store."""

from __future__ import annotations

from collections import deque
from typing import Any

from timegraph.tracing.models import TickRecord


class InMemoryHistoryStore:
    """Keeps the last ``max_ticks`` records in memory.

    Usage:
        store = InMemoryHistoryStore(max_ticks=100)
        store.record_tick(record)
        store.get_tick(record.tick)
    """

    def __init__(self, max_ticks: int = 1000) -> None:
        if max_ticks < 1:
            raise ValueError(f"max_ticks must be positive, got {max_ticks}")
        self._records: deque[TickRecord] = deque(maxlen=max_ticks)
        self._by_tick: dict[int, TickRecord] = {}

    def record_tick(self, record: TickRecord) -> None:
        if len(self._records) == self._records.maxlen:
            evicted = self._records[0]
            self._by_tick.pop(evicted.tick, None)
        self._records.append(record)
        self._by_tick[record.tick] = record

    def get_tick(self, tick: int) -> TickRecord | None:
        return self._by_tick.get(tick)

    def get_events(self, start_tick: int, end_tick: int) -> list[dict[str, Any]]:
        events: list[dict[str, Any]] = []
        for record in self._records:
            if start_tick <= record.tick <= end_tick:
                events.extend(record.events)
        return events

    def get_tick_range(self) -> tuple[int, int] | None:
        if not self._records:
            return None
        return self._records[0].tick, self._records[-1].tick

    def clear(self) -> None:
        self._records.clear()
        self._by_tick.clear()

    @property
    def tick_count(self) -> int:
        return len(self._records)
