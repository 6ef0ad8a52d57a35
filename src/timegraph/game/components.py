"""Game components and resources the time graph acts on.

Spatial data is deliberately thin: a Transform to place things and a Sensor
radius. Overlap detection is external and arrives through the Overlaps
resource.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from timegraph.core.action import Action, ActionRegistry, get_registry
from timegraph.core.component import component
from timegraph.core.identity import EntityId
from timegraph.core.time import LoopTime, TimePoint
from timegraph.errors import ContentError

DEFAULT_INTERACT_MESSAGE = "Interact"


@component
@dataclass
class Transform:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    yaw: float = 0.0


@component
@dataclass
class Player:
    pass


@component
@dataclass
class Sensor:
    """Spatial trigger region. Overlaps against it are computed externally."""

    radius: float = 0.5


@component
@dataclass
class EnvRoot:
    """Root of a piece of static environment."""


@component
@dataclass
class SpawnedAt:
    time: LoopTime


@component
@dataclass
class Lifetime:
    """Despawn once the loop time is ``duration`` past SpawnedAt."""

    duration: LoopTime


@component
@dataclass
class PortalTo:
    target: TimePoint


@dataclass(frozen=True)
class TriggerKind:
    """``Enter`` fires on overlap; ``Interact`` also needs the interact input."""

    kind: Literal["Enter", "Interact"] = "Enter"
    message: str = DEFAULT_INTERACT_MESSAGE

    @classmethod
    def enter(cls) -> TriggerKind:
        return cls("Enter")

    @classmethod
    def interact(cls, message: str = DEFAULT_INTERACT_MESSAGE) -> TriggerKind:
        return cls("Interact", message)

    @property
    def is_interact(self) -> bool:
        return self.kind == "Interact"

    @classmethod
    def from_content(cls, data: Any) -> TriggerKind:
        """Decode ``"Enter"``, ``"Interact"`` or ``{"Interact": {"message": ...}}``."""
        if data in (None, "Enter"):
            return cls.enter()
        if data == "Interact":
            return cls.interact()
        if isinstance(data, Mapping) and set(data) == {"Interact"}:
            inner = data["Interact"] or {}
            message = inner.get("message", DEFAULT_INTERACT_MESSAGE)
            if not isinstance(message, str):
                raise ContentError(f"Interact message must be a string, got {message!r}")
            return cls.interact(message)
        raise ContentError(f"unknown trigger kind {data!r}")


@component
@dataclass
class Trigger:
    """Actions fired by spatial overlap with the player rather than by time."""

    causes: list[Action] = field(default_factory=list)
    oneshot: bool = False
    kind: TriggerKind = field(default_factory=TriggerKind.enter)

    @classmethod
    def from_content(
        cls, data: Mapping[str, Any], registry: ActionRegistry | None = None
    ) -> Trigger:
        """Decode a trigger definition.

        ``causes`` maps action tags to payloads, like a happenings group.

        Raises:
            ContentError: On a malformed definition or an undecodable action.
        """
        unknown = set(data) - {"causes", "oneshot", "kind"}
        if unknown:
            raise ContentError(f"unknown trigger field(s): {', '.join(sorted(unknown))}")
        oneshot = data.get("oneshot", False)
        if not isinstance(oneshot, bool):
            raise ContentError("trigger `oneshot` must be a boolean")
        causes = data.get("causes", {})
        if not isinstance(causes, Mapping):
            raise ContentError("trigger `causes` must be an object of action tags")
        entries = getattr(causes, "pairs", None) or list(causes.items())
        actions = (registry or get_registry()).decode_list(entries, context="trigger")
        return cls(
            causes=actions,
            oneshot=oneshot,
            kind=TriggerKind.from_content(data.get("kind")),
        )


@component
@dataclass
class InteractSign:
    """The UI node showing the interact prompt."""


@component
@dataclass
class Text:
    value: str = ""


@component
@dataclass
class Visibility:
    visible: bool = True


@component
@dataclass
class Hand:
    """Clock hand; its yaw follows loop time."""


@component
@dataclass
class Lever:
    flipped: bool = False


@dataclass
class Overlaps:
    """Overlap pairs supplied by the physics collaborator each tick.

    Lookups are symmetric: ``overlapping(a, b) == overlapping(b, a)``.
    """

    pairs: set[frozenset[EntityId]] = field(default_factory=set)

    def add(self, a: EntityId, b: EntityId) -> None:
        self.pairs.add(frozenset((a, b)))

    def discard(self, a: EntityId, b: EntityId) -> None:
        self.pairs.discard(frozenset((a, b)))

    def clear(self) -> None:
        self.pairs.clear()

    def overlapping(self, a: EntityId, b: EntityId) -> bool:
        return frozenset((a, b)) in self.pairs


@dataclass
class InteractInput:
    """Interact button state; ``just_pressed`` is true for one tick per press."""

    just_pressed: bool = False
