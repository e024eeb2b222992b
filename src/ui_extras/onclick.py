"""Run queued behaviors when a UI node is clicked.

Attach an :class:`OnClick` component to any entity that carries an
:class:`~ui_extras.components.Interaction`. Every time its interaction
changes to ``PRESSED`` the queued behaviors run once, in the order they were
added, unless the entity is marked :class:`~ui_extras.components.UiDisabled`.

Each pass scans and takes every triggered queue out of its component before
running anything, so behaviors are free to despawn entities or edit any
``OnClick`` (their own included) while the pass is in progress.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from ui_extras.components import Interaction, UiDisabled
from ui_extras.ecs.schedule import SystemSet
from ui_extras.ecs.system import System, into_system
from ui_extras.ecs.world import Entity, World

ClickHandlerSet = SystemSet("click_handlers")


def _invoke_system(slot: SystemBehavior | EntitySystemBehavior, input: Any, world: World) -> None:
    system, slot.system = slot.system, None
    if system is None:
        # already running further up the stack
        return
    try:
        if not slot.initialized:
            system.initialize(world)
            slot.initialized = True
        system.run(input, world)
        system.apply_deferred(world)
    finally:
        slot.system = system


@dataclass(slots=True)
class SystemBehavior:
    """Runs a system that takes no input."""

    system: System | None
    initialized: bool = False

    def invoke(self, entity: Entity, world: World) -> None:
        _invoke_system(self, None, world)


@dataclass(slots=True)
class EntitySystemBehavior:
    """Runs a system that receives the clicked entity."""

    system: System | None
    initialized: bool = False

    def invoke(self, entity: Entity, world: World) -> None:
        _invoke_system(self, entity, world)


@dataclass(slots=True)
class CliBehavior:
    """Forwards a command line to the console interpreter."""

    command: str

    def invoke(self, entity: Entity, world: World) -> None:
        world.run_clicommand(self.command)


ClickBehavior = Union[SystemBehavior, EntitySystemBehavior, CliBehavior]


@dataclass(slots=True)
class OnClick:
    """Sequence of behaviors to run automatically when a UI node is clicked."""

    actions: list[ClickBehavior] = field(default_factory=list)

    @classmethod
    def new(cls) -> OnClick:
        return cls()

    def __len__(self) -> int:
        return len(self.actions)

    def system(self, func: Callable[..., Any] | System) -> OnClick:
        """Run a system when the UI node is clicked.

        Plain functions may declare ``world`` and ``commands`` parameters.
        """
        self.actions.append(SystemBehavior(system=into_system(func)))
        return self

    def entity_system(self, func: Callable[..., Any] | System) -> OnClick:
        """Run a system that is given the clicked entity as its ``entity`` parameter."""
        self.actions.append(EntitySystemBehavior(system=into_system(func, input_param="entity")))
        return self

    def cli(self, command: str) -> OnClick:
        """Run a console command when the UI node is clicked."""
        self.actions.append(CliBehavior(command=command))
        return self


class OnClickDispatcher:
    """Exclusive system that executes the ``OnClick`` queues of pressed entities."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._last_run = 0
        self._logger = logger or logging.getLogger("ui_extras.onclick")

    def __repr__(self) -> str:
        return "OnClickDispatcher()"

    def initialize(self, world: World) -> None:
        pass

    def run(self, input: Any, world: World) -> None:
        self.dispatch(world)

    def apply_deferred(self, world: World) -> None:
        pass

    def dispatch(self, world: World) -> int:
        """Run one pass and return how many entities had their behaviors executed."""
        last_run, self._last_run = self._last_run, world.increment_change_tick()

        buffered = self._collect(world, since=last_run)
        if not buffered:
            return 0
        self._logger.debug("onclick_collected", extra={"entity_count": len(buffered)})

        completed = 0
        try:
            for entity, holder, actions in buffered:
                for action in actions:
                    action.invoke(entity, world)
                self._write_back(world, entity, holder, actions)
                completed += 1
        finally:
            if completed < len(buffered):
                self._logger.warning(
                    "onclick_dispatch_aborted",
                    extra={
                        "entity": str(buffered[completed][0]),
                        "pending_entities": len(buffered) - completed - 1,
                    },
                )
                for pending_entity, pending_holder, pending_actions in buffered[completed:]:
                    self._write_back(world, pending_entity, pending_holder, pending_actions)

        return len(buffered)

    def _collect(self, world: World, *, since: int) -> list[tuple[Entity, OnClick, list[ClickBehavior]]]:
        buffered: list[tuple[Entity, OnClick, list[ClickBehavior]]] = []
        for entity, interaction, _ in world.query(
            Interaction,
            OnClick,
            changed=Interaction,
            without=(UiDisabled,),
            since=since,
        ):
            if interaction != Interaction.PRESSED:
                continue
            holder = world.get_mut(entity, OnClick, notify=False)
            actions, holder.actions = holder.actions, []
            buffered.append((entity, holder, actions))
        return buffered

    def _write_back(self, world: World, entity: Entity, holder: OnClick, actions: list[ClickBehavior]) -> None:
        current = world.get_mut(entity, OnClick, notify=False)
        if current is None:
            self._logger.debug("onclick_writeback_skipped", extra={"entity": str(entity)})
            return
        if current is not holder:
            # the component was replaced while its behaviors ran; keep the replacement
            return
        current.actions = actions + current.actions


def onclick_run_behaviors(world: World) -> int:
    """Run one dispatch pass using a dispatcher stored on ``world``."""
    dispatcher = world.get_resource(OnClickDispatcher)
    if dispatcher is None:
        dispatcher = OnClickDispatcher()
        world.insert_resource(dispatcher)
    return dispatcher.dispatch(world)
