"""Tests for LocalStorage."""

from dataclasses import dataclass

import pytest

from timegraph import Query, component
from timegraph.core.identity import SystemEntity
from timegraph.storage import LocalStorage


@component
@dataclass
class Health:
    hp: int


@component
@dataclass
class Tag:
    name: str


@pytest.fixture
def storage():
    return LocalStorage()


def test_get_component_copy_flag_controls_copy_vs_reference(storage):
    entity = storage.create_entity()
    storage.set_component(entity, Health(10))

    copied = storage.get_component(entity, Health, copy=True)
    copied.hp = 0
    assert storage.get_component(entity, Health, copy=False).hp == 10

    live = storage.get_component(entity, Health, copy=False)
    live.hp = 3
    assert storage.get_component(entity, Health).hp == 3


def test_set_component_on_missing_entity_raises(storage):
    entity = storage.create_entity()
    storage.destroy_entity(entity)
    with pytest.raises(KeyError):
        storage.set_component(entity, Health(1))


def test_destroy_is_idempotent(storage):
    entity = storage.create_entity()
    storage.destroy_entity(entity)
    storage.destroy_entity(entity)
    assert not storage.entity_exists(entity)


def test_remove_and_has_component(storage):
    entity = storage.create_entity()
    storage.set_component(entity, Health(1))
    assert storage.has_component(entity, Health)
    assert storage.get_component_types(entity) == frozenset([Health])
    assert storage.remove_component(entity, Health)
    assert not storage.remove_component(entity, Health)
    assert storage.get_component(entity, Health) is None


def test_query_in_creation_order_with_exclusions(storage):
    a = storage.create_entity()
    b = storage.create_entity()
    c = storage.create_entity()
    storage.set_component(a, Health(1))
    storage.set_component(b, Health(2))
    storage.set_component(b, Tag("boss"))
    storage.set_component(c, Tag("door"))

    assert [e for e, _ in storage.query(Health)] == [a, b]
    assert [e for e, _ in storage.query(Query(Health).excluding(Tag))] == [a]
    assert [comps for _, comps in storage.query(Health, Tag, copy=False)] == [
        (Health(2), Tag("boss"))
    ]


def test_query_tolerates_destroy_during_iteration(storage):
    """Entities destroyed mid-query are skipped, never yielded dead."""
    entities = [storage.create_entity() for _ in range(3)]
    for i, entity in enumerate(entities):
        storage.set_component(entity, Health(i))

    seen = []
    for entity, _ in storage.query(Health):
        seen.append(entity)
        storage.destroy_entity(entities[2])
    assert seen == entities[:2]


def test_query_rejects_mixed_arguments(storage):
    with pytest.raises(TypeError):
        list(storage.query(Health, Query(Tag)))


def test_reserved_entity_holds_components(storage):
    storage.insert_reserved(SystemEntity.WORLD)
    storage.set_component(SystemEntity.WORLD, Tag("world"))
    assert storage.entity_exists(SystemEntity.WORLD)
    assert storage.get_component(SystemEntity.WORLD, Tag).name == "world"
