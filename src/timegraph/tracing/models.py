"""Data models for tracing infrastructure.

Records are plain JSON-compatible data so any history backend can store
them without knowing about loop time or timelines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class TickRecord:
    """Record of what the time graph did during a single tick.

    Attributes:
        tick: The world tick number.
        loop_time: Cursor time at the end of the tick, in text form.
        timeline: Active timeline id at the end of the tick.
        state: Loop state name (``"RUNNING"`` or ``"RESETTING"``).
        events: Dispatch events in the order they happened.
        metadata: Optional arbitrary metadata for annotations.

    Example:
        record = TickRecord(
            tick=42,
            loop_time="5s 16ms",
            timeline="tl/intro.tl.json",
            state="RUNNING",
            events=[{"type": "moment", "timeline": "tl/intro.tl.json", "time": "5s"}],
        )
    """

    tick: int
    loop_time: str
    timeline: str
    state: str
    events: list[dict[str, Any]] = field(default_factory=list)
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "tick": self.tick,
            "loop_time": self.loop_time,
            "timeline": self.timeline,
            "state": self.state,
            "events": self.events,
        }
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TickRecord:
        """Create from dictionary (for deserialization)."""
        return cls(
            tick=data["tick"],
            loop_time=data["loop_time"],
            timeline=data["timeline"],
            state=data["state"],
            events=data.get("events", []),
            metadata=data.get("metadata"),
        )
