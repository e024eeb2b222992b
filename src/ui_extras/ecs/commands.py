"""Deferred world mutations staged by a running system."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ui_extras.ecs.world import Entity, World

logger = logging.getLogger("ui_extras.commands")

Command = Callable[["World"], None]


class Commands:
    """Ordered buffer of writes applied to the world after a system runs.

    Ids returned by :meth:`spawn` are reserved immediately so a system can
    stage further commands against an entity that does not exist yet.
    """

    def __init__(self, world: World) -> None:
        self._world = world
        self._queue: list[Command] = []
        self._reserved: list[Entity] = []

    def __len__(self) -> int:
        return len(self._queue)

    def add(self, command: Command) -> None:
        self._queue.append(command)

    def spawn(self, *components: object) -> Entity:
        entity = self._world.reserve_entity()
        self._reserved.append(entity)
        self._queue.append(lambda world: world.spawn_reserved(entity, *components))
        return entity

    def despawn(self, entity: Entity) -> None:
        def _despawn(world: World) -> None:
            if not world.despawn(entity):
                logger.debug("despawn_skipped_missing_entity", extra={"entity": str(entity)})

        self._queue.append(_despawn)

    def insert(self, entity: Entity, *components: object) -> None:
        def _insert(world: World) -> None:
            if not world.contains(entity):
                logger.debug("insert_skipped_missing_entity", extra={"entity": str(entity)})
                return
            world.insert(entity, *components)

        self._queue.append(_insert)

    def remove(self, entity: Entity, component_type: type) -> None:
        def _remove(world: World) -> None:
            if world.contains(entity):
                world.remove(entity, component_type)

        self._queue.append(_remove)

    def insert_resource(self, resource: object) -> None:
        self._queue.append(lambda world: world.insert_resource(resource))

    def run_clicommand(self, line: str) -> None:
        self._queue.append(lambda world: world.run_clicommand(line))

    def apply(self, world: World) -> None:
        """Drain staged commands into ``world`` in staging order."""
        queued, self._queue = self._queue, []
        self._reserved = []
        for command in queued:
            command(world)

    def clear(self) -> None:
        """Drop staged commands and release ids reserved by :meth:`spawn`."""
        self._queue = []
        reserved, self._reserved = self._reserved, []
        for entity in reserved:
            self._world.release_reservation(entity)
