"""Action functionality: protocol, tag registry, decorator and cloning."""

from timegraph.core.action.core import (
    ActionRegistry,
    action,
    clone_actions,
    get_registry,
)
from timegraph.core.action.models import Action, ActionModel

__all__ = [
    "Action",
    "ActionModel",
    "ActionRegistry",
    "action",
    "clone_actions",
    "get_registry",
]
