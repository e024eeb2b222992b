from __future__ import annotations

import pytest

from ui_extras.ecs import Commands, FunctionSystem, System, World, into_system
from ui_extras.errors import SystemNotInitializedError, SystemParamError


class Counter:
    def __init__(self) -> None:
        self.value = 0


def test_function_system_injects_parameters_by_name() -> None:
    world = World()
    received: dict[str, object] = {}

    def behavior(entity, commands, world):
        received.update(entity=entity, commands=commands, world=world)

    system = FunctionSystem(behavior, input_param="entity")
    system.initialize(world)
    system.run("button", world)

    assert received["entity"] == "button"
    assert received["world"] is world
    assert isinstance(received["commands"], Commands)


def test_function_system_without_parameters() -> None:
    world = World()
    calls = []

    system = FunctionSystem(lambda: calls.append("ran"))
    system.initialize(world)
    system.run(None, world)

    assert calls == ["ran"]


def test_unknown_parameter_fails_initialization() -> None:
    world = World()

    def behavior(world, player):
        pass

    system = FunctionSystem(behavior)
    with pytest.raises(SystemParamError):
        system.initialize(world)
    assert not system.initialized


def test_parameter_with_default_is_left_alone() -> None:
    world = World()
    seen = []

    def behavior(world, scale=2):
        seen.append(scale)

    system = FunctionSystem(behavior)
    system.initialize(world)
    system.run(None, world)

    assert seen == [2]


def test_run_before_initialize_raises() -> None:
    system = FunctionSystem(lambda world: None)

    with pytest.raises(SystemNotInitializedError):
        system.run(None, World())


def test_setup_hook_runs_on_initialize_only() -> None:
    world = World()
    world.insert_resource(Counter())

    def setup(world):
        world.resource(Counter).value += 1

    system = FunctionSystem(lambda world: None, setup=setup)
    system.initialize(world)
    system.run(None, world)
    system.run(None, world)

    assert world.resource(Counter).value == 1


def test_deferred_commands_apply_only_on_apply_deferred() -> None:
    world = World()

    def spawn_counter(commands):
        commands.spawn(Counter())

    system = FunctionSystem(spawn_counter)
    system.initialize(world)
    system.run(None, world)
    assert len(world) == 0

    system.apply_deferred(world)
    assert len(world) == 1


def test_into_system_passes_systems_through_and_rejects_garbage() -> None:
    class Custom:
        def initialize(self, world):
            pass

        def run(self, input, world):
            pass

        def apply_deferred(self, world):
            pass

    custom = Custom()
    assert into_system(custom) is custom
    assert isinstance(into_system(lambda: None), System)
    with pytest.raises(TypeError):
        into_system(42)
