"""Phase-ordered system scheduler.

Usage:
    scheduler = PhaseScheduler()
    scheduler.register_system(step_loop)
    scheduler.register_system(run_triggers)
    scheduler.tick(world)

    # Custom execution group builder
    from timegraph.scheduling import PhaseGroupBuilder
    scheduler = PhaseScheduler(group_builder=PhaseGroupBuilder())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from timegraph.core.system import Phase, SystemDescriptor
from timegraph.scheduling.models import (
    ExecutionGroup,
    ExecutionGroupBuilder,
    ExecutionPlan,
    PhaseGroupBuilder,
)

if TYPE_CHECKING:
    from timegraph.world.world import World

logger = logging.getLogger(__name__)


class PhaseScheduler:
    """Synchronous scheduler running systems phase by phase.

    STARTUP systems run on the first tick only. Every other group runs once
    per tick. A system whose run condition is false is skipped for that tick.
    Exceptions raised by a system propagate out of ``tick``.

    Args:
        group_builder: Strategy for building execution groups from systems.
            Defaults to PhaseGroupBuilder.
    """

    def __init__(self, group_builder: ExecutionGroupBuilder | None = None) -> None:
        self._group_builder = group_builder or PhaseGroupBuilder()
        self._systems: list[SystemDescriptor] = []
        self._execution_plan: ExecutionPlan | None = None
        self._started = False

    def register_system(self, descriptor: SystemDescriptor) -> None:
        """Register system for execution. Invalidates cached execution plan."""
        self._systems.append(descriptor)
        self._execution_plan = None

    def build_execution_plan(self) -> ExecutionPlan:
        """Build execution plan using the configured group builder."""
        return self._group_builder.build(self._systems)

    def tick(self, world: World) -> None:
        """Execute all systems once, in phase order."""
        if self._execution_plan is None:
            self._execution_plan = self.build_execution_plan()

        first_tick = not self._started
        self._started = True
        for group in self._execution_plan:
            if group.phase == Phase.STARTUP and not first_tick:
                continue
            self._execute_group(world, group)

    def _execute_group(self, world: World, group: ExecutionGroup) -> None:
        for system in group.systems:
            if not system.should_run(world):
                continue
            logger.debug("Running system %s (%s)", system.name, group.phase.name)
            system.run(world)

    def get_execution_plan_info(self) -> list[list[str]]:
        """Get human-readable execution plan (for debugging)."""
        if self._execution_plan is None:
            self._execution_plan = self.build_execution_plan()

        return [[s.name for s in group.systems] for group in self._execution_plan]
