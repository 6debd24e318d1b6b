from dataclasses import dataclass

import pytest

from mvcore.core import type_info
from mvcore.entity import (
    NULL_ENTITY,
    NULL_ENTITY_ID,
    EntityBuffer,
    World,
    get_entity_id,
    get_entity_version,
    make_handle,
)


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Health:
    value: int = 100


@dataclass
class Tag:
    name: str = ""


def test_handle_round_trip():
    handle = make_handle(1234, 56)
    assert get_entity_id(handle) == 1234
    assert get_entity_version(handle) == 56


def test_null_constants():
    assert get_entity_id(NULL_ENTITY) == NULL_ENTITY_ID
    assert get_entity_version(NULL_ENTITY) == NULL_ENTITY_ID


def test_new_entities_get_sequential_ids_with_version_zero():
    world = World()
    entities = [world.new_entity() for _ in range(3)]
    assert [get_entity_id(e) for e in entities] == [0, 1, 2]
    assert all(get_entity_version(e) == 0 for e in entities)
    assert world.alive_count == 3


def test_destroyed_id_is_recycled_with_next_version():
    world = World()
    first = world.new_entity()
    world.new_entity()
    world.destroy_entity(first)
    assert not world.is_valid(first)
    again = world.new_entity()
    assert get_entity_id(again) == get_entity_id(first)
    assert get_entity_version(again) == get_entity_version(first) + 1
    assert world.is_valid(again)
    assert world.alive_count == 2


def test_recycling_is_last_released_first():
    world = World()
    a, b, c = (world.new_entity() for _ in range(3))
    world.destroy_entity(a)
    world.destroy_entity(c)
    assert get_entity_id(world.new_entity()) == get_entity_id(c)
    assert get_entity_id(world.new_entity()) == get_entity_id(a)
    assert get_entity_id(world.new_entity()) == 3
    assert world.is_valid(b)


def test_destroy_invalid_entity_raises():
    world = World()
    e = world.new_entity()
    world.destroy_entity(e)
    with pytest.raises(ValueError):
        world.destroy_entity(e)


def test_add_get_has_remove_component():
    world = World()
    e = world.new_entity()
    pos = Position(1.0, 2.0)
    assert world.add_component(e, pos) is pos
    assert world.has_component(e, Position)
    assert world.get_component(e, Position) is pos
    world.remove_component(e, Position)
    assert not world.has_component(e, Position)
    with pytest.raises(KeyError):
        world.get_component(e, Position)


def test_component_type_can_be_named_by_string_or_type_info():
    world = World()
    e = world.new_entity()
    health = world.add_component(e, Health(7))
    assert world.get_component(e, "Health") is health
    assert world.get_component(e, type_info(Health)) is health


def test_adding_same_type_twice_raises():
    world = World()
    e = world.new_entity()
    world.add_component(e, Health())
    with pytest.raises(ValueError):
        world.add_component(e, Health())


def test_remove_missing_component_raises():
    world = World()
    e = world.new_entity()
    with pytest.raises(KeyError):
        world.remove_component(e, Health)


def test_swap_remove_keeps_other_components():
    world = World()
    entities = [world.new_entity() for _ in range(5)]
    for i, e in enumerate(entities):
        world.add_component(e, Health(i))
    world.remove_component(entities[1], Health)
    remaining = {
        get_entity_id(e): world.get_component(e, Health).value
        for e in entities
        if world.has_component(e, Health)
    }
    assert remaining == {0: 0, 2: 2, 3: 3, 4: 4}


def test_component_types_lists_attached_types_in_pool_order():
    world = World()
    e = world.new_entity()
    world.add_component(e, Position())
    world.add_component(e, Health())
    names = [info.name for info in world.component_types(e)]
    assert names == ["Position", "Health"]
    assert world.pool_count == 2


def test_destroy_entity_removes_its_components():
    world = World()
    e = world.new_entity()
    world.add_component(e, Position())
    world.add_component(e, Health())
    world.destroy_entity(e)
    fresh = world.new_entity()
    assert world.component_types(fresh) == []


def test_create_and_destroy_hooks():
    world = World()
    events = []
    world.set_create_hook(Health, lambda w, e, c: events.append(("create", e, c.value)))
    world.set_destroy_hook(Health, lambda w, e, c: events.append(("destroy", e, c.value)))
    e = world.new_entity()
    world.add_component(e, Health(5))
    world.destroy_entity(e)
    assert events == [("create", e, 5), ("destroy", e, 5)]


def test_close_runs_destroy_hooks_for_remaining_components():
    destroyed = []
    with World() as world:
        world.set_destroy_hook(Tag, lambda w, e, c: destroyed.append(c.name))
        for name in ("a", "b"):
            world.add_component(world.new_entity(), Tag(name))
    assert sorted(destroyed) == ["a", "b"]
    assert world.alive_count == 0


def test_view_yields_entities_with_all_components():
    world = World()
    both = world.new_entity()
    only_pos = world.new_entity()
    world.add_component(both, Position(1, 1))
    world.add_component(both, Health(3))
    world.add_component(only_pos, Position(2, 2))
    results = list(world.view(Position, Health))
    assert len(results) == 1
    entity, pos, health = results[0]
    assert entity == both
    assert pos == Position(1, 1)
    assert health.value == 3


def test_view_walks_smallest_pool_backwards():
    world = World()
    entities = [world.new_entity() for _ in range(4)]
    for e in entities:
        world.add_component(e, Position())
    world.add_component(entities[0], Health())
    world.add_component(entities[2], Health())
    seen = [e for e, _, _ in world.view(Position, Health)]
    assert seen == [entities[2], entities[0]]


def test_view_of_unknown_type_is_empty_and_creates_no_pool():
    world = World()
    world.add_component(world.new_entity(), Position())
    assert list(world.view(Position, Tag)) == []
    assert world.pool_count == 1


def test_destroying_during_view_is_safe():
    world = World()
    entities = [world.new_entity() for _ in range(6)]
    for i, e in enumerate(entities):
        world.add_component(e, Health(i))
    visited = []
    for e, health in world.view(Health):
        visited.append(health.value)
        world.destroy_entity(e)
    assert sorted(visited) == list(range(6))
    assert world.alive_count == 0
    assert list(world.view(Health)) == []


def test_view_rejects_too_many_types():
    world = World()
    with pytest.raises(ValueError):
        list(world.view(*[f"T{i}" for i in range(17)]))


def test_entity_buffer_clear_destroys_entities():
    world = World()
    buf = EntityBuffer()
    entities = [world.new_entity() for _ in range(10)]
    for e in entities:
        buf.push(e)
    assert list(buf) == entities
    buf.clear(world)
    assert len(buf) == 0
    assert world.alive_count == 0
    assert not any(world.is_valid(e) for e in entities)