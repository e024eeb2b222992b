"""Entity/component storage with tick-based change detection.

The world is the single shared mutable store that systems and click
behaviors operate on. Every component write is stamped with the current
change tick unless the caller asks for a change-suppressed write, which lets
other systems react to edits (``changed=`` queries) without seeing internal
bookkeeping such as a dispatcher taking a queue out of a component.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, TypeVar

from ui_extras.errors import EntityNotFoundError, ResourceNotFoundError

if TYPE_CHECKING:
    from ui_extras.console import ConsoleJob

T = TypeVar("T")

logger = logging.getLogger("ui_extras.world")


@dataclass(frozen=True, slots=True)
class Entity:
    """Stable handle for an object living in a :class:`World`."""

    index: int
    generation: int = 0

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"


@dataclass(slots=True)
class ComponentCell:
    value: Any
    added_tick: int
    changed_tick: int


def _component_key(component: object) -> type:
    if isinstance(component, type):
        raise TypeError(f"Expected a component instance, got the type {component.__name__}")
    return type(component)


class World:
    """Shared mutable store of entities, components and resources."""

    def __init__(self) -> None:
        self._storage: dict[Entity, dict[type, ComponentCell]] = {}
        self._resources: dict[type, Any] = {}
        self._generations: dict[int, int] = {}
        self._free_indices: deque[int] = deque()
        self._next_index = 0
        self._change_tick = 1

    # -- change ticks ---------------------------------------------------

    @property
    def change_tick(self) -> int:
        return self._change_tick

    def increment_change_tick(self) -> int:
        """Advance the change tick and return the tick before the increment."""
        previous = self._change_tick
        self._change_tick += 1
        return previous

    # -- entities -------------------------------------------------------

    def reserve_entity(self) -> Entity:
        """Allocate an id without creating the entity yet."""
        if self._free_indices:
            index = self._free_indices.popleft()
        else:
            index = self._next_index
            self._next_index += 1
        generation = self._generations.setdefault(index, 0)
        return Entity(index=index, generation=generation)

    def spawn(self, *components: object) -> Entity:
        entity = self.reserve_entity()
        self.spawn_reserved(entity, *components)
        return entity

    def spawn_reserved(self, entity: Entity, *components: object) -> None:
        """Materialize an id previously handed out by :meth:`reserve_entity`."""
        if self._generations.get(entity.index) != entity.generation or entity in self._storage:
            raise EntityNotFoundError(f"Entity {entity} is not a pending reservation")
        self._storage[entity] = {}
        self.insert(entity, *components)

    def release_reservation(self, entity: Entity) -> bool:
        """Return an unused reservation to the allocator."""
        if entity in self._storage or self._generations.get(entity.index) != entity.generation:
            return False
        self._generations[entity.index] = entity.generation + 1
        self._free_indices.append(entity.index)
        return True

    def despawn(self, entity: Entity) -> bool:
        if self._storage.pop(entity, None) is None:
            return False
        self._generations[entity.index] = entity.generation + 1
        self._free_indices.append(entity.index)
        logger.debug("entity_despawned", extra={"entity": str(entity)})
        return True

    def contains(self, entity: Entity) -> bool:
        return entity in self._storage

    def entities(self) -> list[Entity]:
        return list(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    # -- components -----------------------------------------------------

    def _cells(self, entity: Entity) -> dict[type, ComponentCell]:
        try:
            return self._storage[entity]
        except KeyError:
            raise EntityNotFoundError(f"Entity {entity} does not exist") from None

    def insert(self, entity: Entity, *components: object) -> None:
        for component in components:
            self.set(entity, component)

    def set(self, entity: Entity, component: object, *, notify: bool = True) -> None:
        """Write a component.

        With ``notify=False`` the write is change-suppressed: it updates the
        value without stamping the component as changed.
        """
        cells = self._cells(entity)
        key = _component_key(component)
        cell = cells.get(key)
        if cell is None:
            tick = self._change_tick if notify else 0
            cells[key] = ComponentCell(value=component, added_tick=tick, changed_tick=tick)
            return
        cell.value = component
        if notify:
            cell.changed_tick = self._change_tick

    def get(self, entity: Entity, component_type: type[T]) -> T | None:
        cell = self._storage.get(entity, {}).get(component_type)
        return None if cell is None else cell.value

    def get_mut(self, entity: Entity, component_type: type[T], *, notify: bool = True) -> T | None:
        """Return a component for in-place mutation, stamping it changed unless ``notify=False``."""
        cell = self._storage.get(entity, {}).get(component_type)
        if cell is None:
            return None
        if notify:
            cell.changed_tick = self._change_tick
        return cell.value

    def has(self, entity: Entity, component_type: type) -> bool:
        return component_type in self._storage.get(entity, {})

    def remove(self, entity: Entity, component_type: type[T]) -> T | None:
        cell = self._cells(entity).pop(component_type, None)
        return None if cell is None else cell.value

    def mark_changed(self, entity: Entity, component_type: type) -> None:
        cell = self._cells(entity).get(component_type)
        if cell is None:
            raise KeyError(f"Entity {entity} has no {component_type.__name__} component")
        cell.changed_tick = self._change_tick

    def is_changed(self, entity: Entity, component_type: type, since: int) -> bool:
        """True when the component was written with notification after tick ``since``."""
        cell = self._storage.get(entity, {}).get(component_type)
        return cell is not None and cell.changed_tick > since

    def query(
        self,
        *component_types: type,
        changed: type | None = None,
        without: tuple[type, ...] = (),
        since: int = 0,
    ) -> Iterator[tuple[Any, ...]]:
        """Yield ``(entity, *components)`` in storage order.

        The entity list is snapshotted up front; entities despawned while the
        caller is iterating are skipped.
        """
        for entity in list(self._storage):
            cells = self._storage.get(entity)
            if cells is None:
                continue
            if any(excluded in cells for excluded in without):
                continue
            if not all(component_type in cells for component_type in component_types):
                continue
            if changed is not None:
                cell = cells.get(changed)
                if cell is None or cell.changed_tick <= since:
                    continue
            yield (entity, *(cells[component_type].value for component_type in component_types))

    # -- resources ------------------------------------------------------

    def insert_resource(self, resource: object) -> None:
        self._resources[_component_key(resource)] = resource

    def get_resource(self, resource_type: type[T]) -> T | None:
        return self._resources.get(resource_type)

    def resource(self, resource_type: type[T]) -> T:
        try:
            return self._resources[resource_type]
        except KeyError:
            raise ResourceNotFoundError(f"Resource {resource_type.__name__} has not been inserted") from None

    def remove_resource(self, resource_type: type[T]) -> T | None:
        return self._resources.pop(resource_type, None)

    def contains_resource(self, resource_type: type) -> bool:
        return resource_type in self._resources

    # -- delegated console commands ---------------------------------------

    def run_clicommand(self, line: str) -> ConsoleJob | None:
        """Forward a command line to the installed console interpreter."""
        from ui_extras.console import ConsoleCommands

        console = self.get_resource(ConsoleCommands)
        if console is None:
            logger.warning("cli_interpreter_missing", extra={"command_line": line})
            return None
        return console.run(self, line)
