"""Scheduling models: phase groups and the builders that produce them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from timegraph.core.system import Phase

if TYPE_CHECKING:
    from timegraph.core.system import SystemDescriptor


@dataclass
class ExecutionGroup:
    """Systems of one phase, run back to back on live world state.

    A system sees every mutation the systems before it made, so e.g. a
    TimeLoop reset begun by ``seek_step`` is visible to ``step_loop``.
    """

    phase: Phase
    systems: list[SystemDescriptor] = field(default_factory=list)


ExecutionPlan = list[ExecutionGroup]
"""Groups in the order a tick runs them."""


@runtime_checkable
class ExecutionGroupBuilder(Protocol):
    """Turns the registered systems into an ExecutionPlan."""

    def build(self, systems: list[SystemDescriptor]) -> ExecutionPlan: ...


class PhaseGroupBuilder:
    """One group per non-empty phase, phases ascending, registration order inside."""

    def build(self, systems: list[SystemDescriptor]) -> ExecutionPlan:
        by_phase: dict[Phase, list[SystemDescriptor]] = {}
        for system in systems:
            by_phase.setdefault(system.phase, []).append(system)
        return [ExecutionGroup(phase=phase, systems=by_phase[phase]) for phase in sorted(by_phase)]
