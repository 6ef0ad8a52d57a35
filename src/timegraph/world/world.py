"""World: Central coordinator for entities, components, resources and systems.

Usage:
    world = World()

    # Spawn entities
    entity = world.spawn(Name("lever"), Transform(1.0, 0.0, 0.0))

    # Resources (single instances owned by the world)
    world.insert_resource(TimeLoop.starting_at("tl/intro.tl.json"))
    tloop = world.resource(TimeLoop)

    # Register and run systems
    world.register_system(step_loop)
    world.tick(1 / 60)
"""

from __future__ import annotations

import warnings
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, TypeVar

from timegraph.core.component import get_registry
from timegraph.core.identity import EntityId, SystemEntity
from timegraph.core.query import Query
from timegraph.core.system import SystemDescriptor
from timegraph.core.time import LoopTime
from timegraph.core.types import Copy
from timegraph.storage.local import LocalStorage
from timegraph.storage.protocol import Storage
from timegraph.world.components import Name, Parent

if TYPE_CHECKING:
    from timegraph.core.system import ExecutionStrategy

ComponentT = TypeVar("ComponentT")
ResourceT = TypeVar("ResourceT")


class World:
    """Central world state and system execution coordinator.

    Owns the storage backend and the execution strategy. Resources are
    stored as components of the reserved WORLD entity, so they share the
    storage backend with ordinary components but are always handed out live.
    """

    def __init__(
        self,
        storage: Storage | None = None,
        execution: ExecutionStrategy | None = None,
    ):
        self._storage = storage or LocalStorage()
        # Import here to avoid circular dependency at module level
        if execution is None:
            from timegraph.scheduling import PhaseScheduler

            execution = PhaseScheduler()
        self._execution = execution
        self._delta = LoopTime.EPOCH
        self._carry_ms = 0.0
        self._tick_count = 0
        self._ensure_system_entities()

    def _ensure_system_entities(self) -> None:
        """Create reserved singleton entities if not present."""
        if not self._storage.entity_exists(SystemEntity.WORLD):
            self._storage.insert_reserved(SystemEntity.WORLD)

    # Entities

    def spawn(self, *components: Any) -> EntityId:
        """Create entity with components.

        Raises:
            TypeError: If any argument is not a registered component.
        """
        for comp in components:
            _check_component(comp)
        entity = self._storage.create_entity()
        seen_types: set[type] = set()
        for comp in components:
            comp_type = type(comp)
            if comp_type in seen_types:
                warnings.warn(
                    f"spawn() received multiple components of type {comp_type.__name__}. "
                    f"Only the last one will be kept.",
                    stacklevel=2,
                )
            seen_types.add(comp_type)
            self._storage.set_component(entity, comp)
        return entity

    def despawn(self, entity: EntityId, recursive: bool = False) -> None:
        """Destroy entity, and with ``recursive`` every descendant linked by Parent.

        Despawning an entity that no longer exists is a no-op.
        """
        if not self._storage.entity_exists(entity):
            return
        if recursive:
            children = [
                child for child, parent in self.query(Parent) if parent.entity == entity
            ]
            for child in children:
                self.despawn(child, recursive=True)
        self._storage.destroy_entity(entity)

    def exists(self, entity: EntityId) -> bool:
        return self._storage.entity_exists(entity)

    def entities(self) -> Iterator[EntityId]:
        """Iterate all living entities, excluding reserved ones."""
        for entity in self._storage.all_entities():
            if not entity.is_reserved:
                yield entity

    # Components

    def get(self, entity: EntityId, component_type: type[ComponentT]) -> ComponentT | None:
        """Get the live component. Mutations are visible to everyone."""
        return self._storage.get_component(entity, component_type, copy=False)

    def get_copy(
        self, entity: EntityId, component_type: type[ComponentT]
    ) -> Copy[ComponentT] | None:
        """Get component copy.

        Modifications must be written back via world.set().
        """
        return self._storage.get_component(entity, component_type, copy=True)

    def set(self, entity: EntityId, component: Any) -> None:
        """Insert or replace a component."""
        _check_component(component)
        self._storage.set_component(entity, component)

    def remove(self, entity: EntityId, component_type: type) -> bool:
        return self._storage.remove_component(entity, component_type)

    def has(self, entity: EntityId, component_type: type) -> bool:
        return self._storage.has_component(entity, component_type)

    def describe(self, entity: EntityId) -> dict[str, Any]:
        """Live components of an entity keyed by component name, for logs and debugging."""
        registry = get_registry()
        described = {
            registry.name_of(comp_type): self._storage.get_component(entity, comp_type, copy=False)
            for comp_type in self._storage.get_component_types(entity)
        }
        return dict(sorted(described.items()))

    def query(self, *component_types: type | Query) -> Iterator[tuple[Any, ...]]:
        """Query entities with specified component types, yielding live components.

        Returns iterator of tuples: (entity, component1, component2, ...).

        Example:
            >>> for entity, xform, hand in world.query(Transform, Hand):
            ...     xform.yaw = angle
        """
        for entity, components in self._storage.query(*component_types, copy=False):
            if entity.is_reserved:
                continue
            yield (entity, *components)

    def query_copies(self, *component_types: type | Query) -> Iterator[tuple[Any, ...]]:
        """Like query(), but components are deep copies."""
        for entity, components in self._storage.query(*component_types, copy=True):
            if entity.is_reserved:
                continue
            yield (entity, *components)

    def single(self, *component_types: type | Query) -> tuple[Any, ...] | None:
        """First match of a query, or None. Never raises for a missing entity."""
        return next(self.query(*component_types), None)

    def find_named(self, name: str) -> EntityId | None:
        """First entity whose Name matches, or None."""
        for entity, entity_name in self.query(Name):
            if entity_name.value == name:
                return entity
        return None

    # Resources

    def insert_resource(self, resource: Any) -> None:
        """Insert or replace the resource of this type."""
        self._storage.set_component(SystemEntity.WORLD, resource)

    def resource(self, resource_type: type[ResourceT]) -> ResourceT:
        """Get a resource that must exist.

        Raises:
            KeyError: If no resource of this type was inserted.
        """
        value = self.get_resource(resource_type)
        if value is None:
            raise KeyError(f"Resource {resource_type.__name__} not present")
        return value

    def get_resource(self, resource_type: type[ResourceT]) -> ResourceT | None:
        return self._storage.get_component(SystemEntity.WORLD, resource_type, copy=False)

    def has_resource(self, resource_type: type) -> bool:
        return self._storage.has_component(SystemEntity.WORLD, resource_type)

    def remove_resource(self, resource_type: type) -> bool:
        return self._storage.remove_component(SystemEntity.WORLD, resource_type)

    # Systems

    def register_system(self, descriptor: SystemDescriptor) -> None:
        """Register system for execution.

        Delegates to the injected execution strategy.
        """
        self._execution.register_system(descriptor)

    def register_systems(self, *descriptors: SystemDescriptor) -> None:
        """Register multiple systems."""
        for d in descriptors:
            self.register_system(d)

    @property
    def delta(self) -> LoopTime:
        """Elapsed time of the tick currently executing."""
        return self._delta

    @property
    def tick_count(self) -> int:
        """Number of completed ticks."""
        return self._tick_count

    def tick(self, dt: float | LoopTime) -> None:
        """Execute all registered systems once, synchronously.

        Float deltas are rounded to whole milliseconds and the rounding error
        is carried into the next tick, so loop time keeps pace with wall time.

        Args:
            dt: Elapsed real time since the previous tick, in seconds or as a LoopTime.
        """
        if isinstance(dt, LoopTime):
            if dt.millis < 0:
                raise ValueError(f"Tick delta must not be negative, got {dt}")
            self._delta = dt
        else:
            if dt < 0:
                raise ValueError(f"Tick delta must not be negative, got {dt}s")
            exact = dt * 1000 + self._carry_ms
            millis = max(round(exact), 0)
            self._carry_ms = exact - millis
            self._delta = LoopTime(millis)
        self._execution.tick(self)
        self._tick_count += 1


def _check_component(value: Any) -> None:
    if not get_registry().is_component(type(value)):
        raise TypeError(
            f"{type(value).__name__} is not a component; decorate it with @component "
            f"or insert it with insert_resource()"
        )
