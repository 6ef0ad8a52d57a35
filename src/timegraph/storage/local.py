"""In-process storage backend.

The game runs single-threaded inside one process, so entities and their
components live in plain dicts.

Usage:
    world = World(storage=LocalStorage())
"""

from __future__ import annotations

import copy as cp
from collections.abc import Iterator
from typing import Any, TypeVar, cast

from timegraph.core.identity import EntityId
from timegraph.core.query import Query
from timegraph.core.types import Copy
from timegraph.storage.allocator import EntityAllocator

T = TypeVar("T")


class LocalStorage:
    """Entity -> {component type -> component} dict storage.

    Entities iterate in creation order, so queries (and therefore trigger
    and portal handling) are deterministic.
    """

    def __init__(self) -> None:
        self._allocator = EntityAllocator()
        self._components: dict[EntityId, dict[type, Any]] = {}

    def create_entity(self) -> EntityId:
        """Create a new entity and return its ID."""
        entity = self._allocator.allocate()
        self._components[entity] = {}
        return entity

    def insert_reserved(self, entity: EntityId) -> None:
        """Make a reserved entity addressable without going through the allocator."""
        self._components.setdefault(entity, {})

    def destroy_entity(self, entity: EntityId) -> None:
        """Destroy an entity and remove all its components.

        Destroying a dead or unknown entity is a no-op.
        """
        if entity in self._components:
            del self._components[entity]
            self._allocator.deallocate(entity)

    def entity_exists(self, entity: EntityId) -> bool:
        """Check if an entity exists and is alive."""
        return entity in self._components and self._allocator.is_alive(entity)

    def all_entities(self) -> Iterator[EntityId]:
        """Iterate over all alive entities.

        Yields:
            EntityId for each alive entity.
        """
        for entity in list(self._components):
            if self._allocator.is_alive(entity):
                yield entity

    def get_component(
        self, entity: EntityId, component_type: type[T], copy: bool = True
    ) -> Copy[T] | T | None:
        """Get a component from an entity.

        Args:
            entity: Entity to query.
            component_type: Type of component to retrieve.
            copy: Whether to return a copy of the component (default True).

        Returns:
            Component instance or None if not present.
        """
        component = self._components.get(entity, {}).get(component_type)
        if component is None:
            return None
        return cp.deepcopy(component) if copy else cast(T, component)

    def set_component(self, entity: EntityId, component: Any) -> None:
        """Set or update a component on an entity (type inferred from the instance).

        Raises:
            KeyError: If the entity does not exist.
        """
        if entity not in self._components:
            raise KeyError(f"Entity {entity} does not exist")
        self._components[entity][type(component)] = component

    def remove_component(self, entity: EntityId, component_type: type) -> bool:
        """Remove a component from an entity.

        Returns:
            True if component was removed, False if not present.
        """
        components = self._components.get(entity)
        if components is None or component_type not in components:
            return False
        del components[component_type]
        return True

    def has_component(self, entity: EntityId, component_type: type) -> bool:
        """Check if an entity has a specific component type."""
        return component_type in self._components.get(entity, {})

    def get_component_types(self, entity: EntityId) -> frozenset[type]:
        """Get all component types present on an entity."""
        return frozenset(self._components.get(entity, {}))

    def query(
        self,
        *component_types: type | Query,
        copy: bool = True,
    ) -> Iterator[tuple[EntityId, tuple[Any, ...]]]:
        """Find entities with all specified components.

        O(n) scan over a snapshot of the entity list, so callers may spawn or
        destroy entities while iterating. Entities destroyed mid-iteration
        are skipped.

        Args:
            *component_types: Component types to query for, or a single Query.
            copy: Whether to return copies of components (default True).

        Yields:
            Tuples of (entity, (component1, component2, ...)) for each match.
        """
        query = _as_query(component_types)
        for entity in list(self._components):
            components = self._components.get(entity)
            if components is None or not self._allocator.is_alive(entity):
                continue
            if not query.matches_archetype(frozenset(components)):
                continue
            values = tuple(components[t] for t in query.required)
            if copy:
                values = cp.deepcopy(values)
            yield entity, values


def _as_query(component_types: tuple[type | Query, ...]) -> Query:
    if len(component_types) == 1 and isinstance(component_types[0], Query):
        return component_types[0]
    if any(isinstance(t, Query) for t in component_types):
        raise TypeError("Pass either component types or a single Query, not both")
    return Query(*cast(tuple[type, ...], component_types))
