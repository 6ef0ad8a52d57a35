"""Entity identity models.

Usage:
    entity = EntityId(index=1042, generation=1)
    singleton = SystemEntity.WORLD
"""

from dataclasses import dataclass

RESERVED_ENTITIES = 1000
"""Indices below this belong to singleton entities and are never allocated."""


@dataclass(frozen=True, slots=True, order=True)
class EntityId:
    """Generational entity handle.

    A handle is stale once its entity is despawned: the slot's next occupant
    has a higher generation, so old handles never address it.
    """

    index: int = 0
    generation: int = 0

    @property
    def is_reserved(self) -> bool:
        return self.index < RESERVED_ENTITIES

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"


class SystemEntity:
    """Reserved singleton entities."""

    WORLD = EntityId(index=0, generation=0)
    """Holds the world's resources as components."""
