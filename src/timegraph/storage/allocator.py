"""Entity id allocation with generation recycling."""

from __future__ import annotations

from collections import deque

from timegraph.core.identity import RESERVED_ENTITIES, EntityId


class EntityAllocator:
    """Hands out entity ids above the reserved range.

    A freed index comes back with its generation bumped, and freed indices
    are reused in the order they were freed.
    """

    def __init__(self) -> None:
        self._next_index = RESERVED_ENTITIES
        self._live: dict[int, int] = {}  # index -> generation of the current occupant
        self._free: deque[EntityId] = deque()

    def allocate(self) -> EntityId:
        if self._free:
            entity = self._free.popleft()
        else:
            entity = EntityId(index=self._next_index, generation=0)
            self._next_index += 1
        self._live[entity.index] = entity.generation
        return entity

    def deallocate(self, entity: EntityId) -> None:
        """Free an entity's index. Freeing a stale handle is a no-op.

        Raises:
            ValueError: If the entity is a reserved singleton.
        """
        if entity.is_reserved:
            raise ValueError(f"Cannot deallocate reserved entity {entity}")
        if not self.is_alive(entity):
            return
        del self._live[entity.index]
        self._free.append(EntityId(index=entity.index, generation=entity.generation + 1))

    def is_alive(self, entity: EntityId) -> bool:
        """Reserved entities are always alive; others until deallocated."""
        return entity.is_reserved or self._live.get(entity.index) == entity.generation

    def __len__(self) -> int:
        return len(self._live)
