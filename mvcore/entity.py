"""A small entity-component system built on sparse sets.

Entities are 64-bit handles: the low 32 bits are the entity id and the high
32 bits are a version that is bumped each time the id is recycled. Each
component type has a pool that keeps its components densely packed, with a
sparse map from entity id to position in the dense arrays.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from mvcore.core import TypeInfo, type_info

_U32_MASK = 0xFFFF_FFFF

NULL_ENTITY = 0xFFFF_FFFF_FFFF_FFFF
NULL_ENTITY_ID = _U32_MASK
VIEW_MAX = 16

ComponentHook = Callable[["World", int, Any], None]
ComponentType = type | str | TypeInfo


def get_entity_version(entity: int) -> int:
    """Return the version part of an entity handle."""
    return (entity >> 32) & _U32_MASK


def get_entity_id(entity: int) -> int:
    """Return the id part of an entity handle."""
    return entity & _U32_MASK


def make_handle(entity_id: int, version: int) -> int:
    """Combine an id and a version into an entity handle."""
    return ((version & _U32_MASK) << 32) | (entity_id & _U32_MASK)


@dataclass
class _Pool:
    type: TypeInfo
    sparse: dict[int, int] = field(default_factory=dict)
    dense: list[int] = field(default_factory=list)
    data: list[Any] = field(default_factory=list)
    on_create: ComponentHook | None = None
    on_destroy: ComponentHook | None = None

    def __len__(self) -> int:
        return len(self.dense)

    def has(self, entity: int) -> bool:
        return get_entity_id(entity) in self.sparse

    def get(self, entity: int) -> Any:
        try:
            return self.data[self.sparse[get_entity_id(entity)]]
        except KeyError:
            raise KeyError(
                f"entity {entity:#x} has no {self.type.name} component"
            ) from None

    def add(self, world: World, entity: int, component: Any) -> Any:
        eid = get_entity_id(entity)
        if eid in self.sparse:
            raise ValueError(
                f"entity {entity:#x} already has a {self.type.name} component"
            )
        self.sparse[eid] = len(self.dense)
        self.dense.append(entity)
        self.data.append(component)
        if self.on_create is not None:
            self.on_create(world, entity, component)
        return component

    def remove(self, world: World, entity: int) -> None:
        eid = get_entity_id(entity)
        try:
            pos = self.sparse[eid]
        except KeyError:
            raise KeyError(
                f"entity {entity:#x} has no {self.type.name} component"
            ) from None

        if self.on_destroy is not None:
            self.on_destroy(world, entity, self.data[pos])

        last_entity = self.dense[-1]
        self.sparse[get_entity_id(last_entity)] = pos
        self.dense[pos] = last_entity
        del self.sparse[eid]
        self.dense.pop()

        self.data[pos] = self.data[-1]
        self.data.pop()

    def destroy_all(self, world: World) -> None:
        if self.on_destroy is not None:
            for entity, component in zip(list(self.dense), list(self.data)):
                self.on_destroy(world, entity, component)
        self.sparse.clear()
        self.dense.clear()
        self.data.clear()


class World:
    """A collection of entities and the component pools attached to them."""

    def __init__(self) -> None:
        self._entities: list[int] = []
        self._avail_id = NULL_ENTITY_ID
        self._alive = 0
        self._pools: dict[int, _Pool] = {}

    @property
    def alive_count(self) -> int:
        """Number of entities created and not yet destroyed."""
        return self._alive

    @property
    def pool_count(self) -> int:
        """Number of component pools the world has created."""
        return len(self._pools)

    def _pool(self, component_type: ComponentType) -> _Pool:
        info = type_info(component_type)
        pool = self._pools.get(info.id)
        if pool is None:
            pool = _Pool(info)
            self._pools[info.id] = pool
        return pool

    def _existing_pool(self, component_type: ComponentType) -> _Pool | None:
        return self._pools.get(type_info(component_type).id)

    def new_entity(self) -> int:
        """Create an entity, reusing a released id when one is available."""
        self._alive += 1
        if self._avail_id == NULL_ENTITY_ID:
            entity = make_handle(len(self._entities), 0)
            self._entities.append(entity)
            return entity

        cur_id = self._avail_id
        slot = self._entities[cur_id]
        self._avail_id = get_entity_id(slot)
        recycled = make_handle(cur_id, get_entity_version(slot))
        self._entities[cur_id] = recycled
        return recycled

    def destroy_entity(self, entity: int) -> None:
        """Remove all components of ``entity`` and release its id."""
        if not self.is_valid(entity):
            raise ValueError(f"entity {entity:#x} is not alive in this world")
        for pool in list(self._pools.values()):
            if pool.has(entity):
                pool.remove(self, entity)

        eid = get_entity_id(entity)
        self._entities[eid] = make_handle(
            self._avail_id, get_entity_version(entity) + 1
        )
        self._avail_id = eid
        self._alive -= 1

    def is_valid(self, entity: int) -> bool:
        """True if ``entity`` refers to a live entity of this world."""
        eid = get_entity_id(entity)
        return eid < len(self._entities) and self._entities[eid] == entity

    def component_types(self, entity: int) -> list[TypeInfo]:
        """Types of all components attached to ``entity``, in pool order."""
        return [pool.type for pool in self._pools.values() if pool.has(entity)]

    def set_create_hook(
        self, component_type: ComponentType, func: ComponentHook | None
    ) -> None:
        """Call ``func(world, entity, component)`` after each add of this type."""
        self._pool(component_type).on_create = func

    def set_destroy_hook(
        self, component_type: ComponentType, func: ComponentHook | None
    ) -> None:
        """Call ``func(world, entity, component)`` before each removal of this type."""
        self._pool(component_type).on_destroy = func

    def add_component(self, entity: int, component: Any) -> Any:
        """Attach ``component`` to ``entity`` under its own type; return it."""
        return self._pool(type(component)).add(self, entity, component)

    def remove_component(self, entity: int, component_type: ComponentType) -> None:
        """Detach the component of ``component_type`` from ``entity``."""
        self._pool(component_type).remove(self, entity)

    def has_component(self, entity: int, component_type: ComponentType) -> bool:
        """True if ``entity`` has a component of ``component_type``."""
        return self._pool(component_type).has(entity)

    def get_component(self, entity: int, component_type: ComponentType) -> Any:
        """Return the component of ``component_type`` attached to ``entity``."""
        return self._pool(component_type).get(entity)

    def view(self, *args: ComponentType) -> Iterator[tuple[Any, ...]]:
        """Yield ``(entity, component, ...)`` for entities having every type.

        Iteration walks the smallest of the pools from its last entry to its
        first, so destroying the current entity while iterating is safe.
        """
        if len(args) > VIEW_MAX:
            raise ValueError(f"a view may cover at most {VIEW_MAX} component types")
        pools: list[_Pool] = []
        for component_type in args:
            pool = self._existing_pool(component_type)
            if pool is None:
                return
            pools.append(pool)
        if not pools:
            return

        driver = pools[0]
        for pool in pools[1:]:
            if len(pool) < len(driver):
                driver = pool

        index = len(driver)
        while index > 0:
            index -= 1
            if index >= len(driver.dense):
                continue
            entity = driver.dense[index]
            if all(pool.has(entity) for pool in pools):
                yield (entity, *(pool.get(entity) for pool in pools))

    def close(self) -> None:
        """Run destroy hooks for every remaining component and empty the world."""
        for pool in list(self._pools.values()):
            pool.destroy_all(self)
        self._pools.clear()
        self._entities.clear()
        self._avail_id = NULL_ENTITY_ID
        self._alive = 0

    def __enter__(self) -> World:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class EntityBuffer:
    """Entities collected for destruction at a later point."""

    def __init__(self, entities: Iterable[int] = ()) -> None:
        self._entities = list(entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entities)

    def push(self, entity: int) -> None:
        """Queue ``entity`` for destruction."""
        self._entities.append(entity)

    def clear(self, world: World) -> None:
        """Destroy every queued entity in ``world`` and empty the buffer."""
        for entity in self._entities:
            world.destroy_entity(entity)
        self._entities.clear()