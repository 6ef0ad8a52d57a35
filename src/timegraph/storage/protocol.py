"""Storage backend protocol.

World talks to its entities and components only through this interface;
LocalStorage is the in-process implementation.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, TypeVar

from timegraph.core.identity import EntityId
from timegraph.core.query import Query

T = TypeVar("T")


class Storage(Protocol):
    """Entity and component backend. Component types key components per entity."""

    def create_entity(self) -> EntityId: ...

    def insert_reserved(self, entity: EntityId) -> None:
        """Make a reserved singleton (e.g. WORLD) addressable."""
        ...

    def destroy_entity(self, entity: EntityId) -> None:
        """Remove an entity with its components. Unknown entities are ignored."""
        ...

    def entity_exists(self, entity: EntityId) -> bool: ...

    def all_entities(self) -> Iterator[EntityId]:
        """Living entities in creation order, reserved ones included."""
        ...

    def get_component(
        self, entity: EntityId, component_type: type[T], copy: bool = True
    ) -> T | None: ...

    def set_component(self, entity: EntityId, component: Any) -> None:
        """Insert or replace; the key is ``type(component)``."""
        ...

    def remove_component(self, entity: EntityId, component_type: type) -> bool: ...

    def has_component(self, entity: EntityId, component_type: type) -> bool: ...

    def get_component_types(self, entity: EntityId) -> frozenset[type]: ...

    def query(
        self,
        *component_types: type | Query,
        copy: bool = True,
    ) -> Iterator[tuple[EntityId, tuple[Any, ...]]]:
        """Entities matching the types (or a single Query), creation order."""
        ...
