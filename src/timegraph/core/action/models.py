"""Action models: the protocol every schedulable unit of work implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from timegraph.world.world import World


@runtime_checkable
class Action(Protocol):
    """A serializable unit of world-mutating behavior.

    Side effects are unconstrained: spawn or despawn entities, patch timeline
    content, move the loop cursor, log. Actions are owned by the list that
    holds them and must be cloned, never shared, when copied elsewhere.
    """

    def apply(self, world: World) -> None:
        """Apply this action to the world."""
        ...


class ActionModel(BaseModel):
    """Base for concrete actions. Unknown payload fields are rejected."""

    model_config = ConfigDict(extra="forbid")
