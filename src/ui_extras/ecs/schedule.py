"""Single-threaded system schedule with set-based ordering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from ui_extras.ecs.system import System, into_system
from ui_extras.ecs.world import World
from ui_extras.errors import ScheduleBuildError

logger = logging.getLogger("ui_extras.schedule")


@dataclass(frozen=True, slots=True)
class SystemSet:
    """Named label used to order groups of systems against each other."""

    name: str


@dataclass(slots=True)
class _SetConfig:
    before: set[SystemSet] = field(default_factory=set)
    after: set[SystemSet] = field(default_factory=set)


@dataclass(slots=True)
class _SystemNode:
    system: System
    sets: frozenset[SystemSet]
    before: frozenset[SystemSet]
    after: frozenset[SystemSet]
    initialized: bool = False


def _as_sets(value: SystemSet | Iterable[SystemSet]) -> frozenset[SystemSet]:
    if isinstance(value, SystemSet):
        return frozenset((value,))
    return frozenset(value)


class Schedule:
    """Runs systems one at a time, each with exclusive access to the world."""

    def __init__(self) -> None:
        self._nodes: list[_SystemNode] = []
        self._set_configs: dict[SystemSet, _SetConfig] = {}
        self._order: list[_SystemNode] | None = None

    def add_system(
        self,
        system: Any,
        *,
        in_set: SystemSet | Iterable[SystemSet] = (),
        before: SystemSet | Iterable[SystemSet] = (),
        after: SystemSet | Iterable[SystemSet] = (),
    ) -> System:
        node = _SystemNode(
            system=into_system(system),
            sets=_as_sets(in_set),
            before=_as_sets(before),
            after=_as_sets(after),
        )
        self._nodes.append(node)
        self._order = None
        return node.system

    def configure_set(
        self,
        system_set: SystemSet,
        *,
        before: SystemSet | Iterable[SystemSet] = (),
        after: SystemSet | Iterable[SystemSet] = (),
    ) -> None:
        config = self._set_configs.setdefault(system_set, _SetConfig())
        config.before.update(_as_sets(before))
        config.after.update(_as_sets(after))
        self._order = None

    def systems(self) -> list[System]:
        """Systems in execution order."""
        return [node.system for node in self._build_order()]

    def run(self, world: World) -> None:
        for node in self._build_order():
            if not node.initialized:
                node.system.initialize(world)
                node.initialized = True
            node.system.run(None, world)
            node.system.apply_deferred(world)

    def _runs_before(self, first: _SystemNode, second: _SystemNode) -> bool:
        if first.before & second.sets or second.after & first.sets:
            return True
        for set_a in first.sets:
            config_a = self._set_configs.get(set_a)
            for set_b in second.sets:
                config_b = self._set_configs.get(set_b)
                if config_a is not None and set_b in config_a.before:
                    return True
                if config_b is not None and set_a in config_b.after:
                    return True
        return False

    def _build_order(self) -> list[_SystemNode]:
        if self._order is not None:
            return self._order

        count = len(self._nodes)
        successors: list[list[int]] = [[] for _ in range(count)]
        indegree = [0] * count
        for i, first in enumerate(self._nodes):
            for j, second in enumerate(self._nodes):
                if i != j and self._runs_before(first, second):
                    successors[i].append(j)
                    indegree[j] += 1

        ready = [i for i in range(count) if indegree[i] == 0]
        order: list[int] = []
        while ready:
            # lowest insertion index first
            current = min(ready)
            ready.remove(current)
            order.append(current)
            for successor in successors[current]:
                indegree[successor] -= 1
                if indegree[successor] == 0:
                    ready.append(successor)

        if len(order) != count:
            stuck = [repr(self._nodes[i].system) for i in range(count) if i not in order]
            raise ScheduleBuildError(f"System ordering contains a cycle involving: {', '.join(stuck)}")

        self._order = [self._nodes[i] for i in order]
        logger.debug("schedule_built", extra={"system_count": count})
        return self._order


class Plugin(Protocol):
    """Bundle of setup applied to an :class:`App`."""

    def build(self, app: App) -> None:
        """Register systems and resources on ``app``."""


class App:
    """A world plus the schedule that advances it one tick per :meth:`update`."""

    def __init__(self, world: World | None = None) -> None:
        self.world = world if world is not None else World()
        self.schedule = Schedule()

    def add_plugins(self, *plugins: Plugin) -> App:
        for plugin in plugins:
            plugin.build(self)
        return self

    def add_system(self, system: Any, **ordering: Any) -> App:
        self.schedule.add_system(system, **ordering)
        return self

    def configure_set(self, system_set: SystemSet, **ordering: Any) -> App:
        self.schedule.configure_set(system_set, **ordering)
        return self

    def update(self) -> None:
        self.schedule.run(self.world)
