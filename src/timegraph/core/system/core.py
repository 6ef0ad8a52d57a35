"""System decorator.

Usage:
    @system(phase=Phase.PRE_UPDATE, run_if=is_running)
    def step_loop(world: World) -> None:
        ...

    # Defaults to the UPDATE phase with no run condition
    @system()
    def run_triggers(world: World) -> None:
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from timegraph.core.system.models import Phase, RunCondition, SystemDescriptor


class _SystemDecorator:
    """System decorator factory. Used as @system(...) or @system.startup()."""

    def __call__(
        self,
        phase: Phase = Phase.UPDATE,
        run_if: RunCondition | None = None,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], SystemDescriptor]:
        """Turn a function taking the world into a system descriptor.

        Args:
            phase: Execution phase the system belongs to.
            run_if: Optional predicate evaluated every tick before running.
            name: Override for the system name (defaults to the function name).

        Returns:
            Decorator that returns the system's descriptor.
        """

        def decorator(fn: Callable[..., Any]) -> SystemDescriptor:
            return SystemDescriptor(
                name=name or fn.__name__,
                run=fn,
                phase=phase,
                run_if=run_if,
            )

        return decorator

    def startup(self) -> Callable[[Callable[..., Any]], SystemDescriptor]:
        """Startup system: runs once, on the first tick.

        Usage:
            @system.startup()
            def setup_ui(world): ...
        """
        return self(phase=Phase.STARTUP)


system = _SystemDecorator()
