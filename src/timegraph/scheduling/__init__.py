"""System scheduling and execution."""

from timegraph.scheduling.models import (
    ExecutionGroup,
    ExecutionGroupBuilder,
    ExecutionPlan,
    PhaseGroupBuilder,
)
from timegraph.scheduling.scheduler import PhaseScheduler

__all__ = [
    # Schedulers
    "PhaseScheduler",
    # Models
    "ExecutionGroup",
    "ExecutionPlan",
    # Group Builders
    "ExecutionGroupBuilder",
    "PhaseGroupBuilder",
]
