"""System models: descriptors and execution phases."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from timegraph.world.world import World


class Phase(IntEnum):
    """Execution phase. Phases run in ascending order every tick."""

    STARTUP = 0  # First tick only
    PRE_UPDATE = 1
    UPDATE = 2
    POST_UPDATE = 3


RunCondition = Callable[["World"], bool]
"""Predicate deciding whether a system runs on the current tick."""


@dataclass(frozen=True)
class SystemDescriptor:
    """Metadata about a registered system."""

    name: str
    run: Callable[..., Any]
    phase: Phase = Phase.UPDATE
    run_if: RunCondition | None = None

    def should_run(self, world: World) -> bool:
        """Evaluate the run condition for this tick.

        Returns:
            True when the system has no condition or the condition holds.
        """
        return self.run_if is None or bool(self.run_if(world))


@runtime_checkable
class ExecutionStrategy(Protocol):
    """Runs the world's systems. World.tick() delegates here."""

    def register_system(self, descriptor: SystemDescriptor) -> None: ...

    def tick(self, world: World) -> None:
        """Run every due system once against live world state."""
        ...
