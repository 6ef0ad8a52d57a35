"""System functionality: decorator, descriptors and phases."""

from timegraph.core.system.core import system
from timegraph.core.system.models import (
    ExecutionStrategy,
    Phase,
    RunCondition,
    SystemDescriptor,
)

__all__ = [
    "system",
    "SystemDescriptor",
    "Phase",
    "RunCondition",
    "ExecutionStrategy",
]
