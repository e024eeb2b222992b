from __future__ import annotations

from dataclasses import dataclass

import pytest

from ui_extras.components import Interaction, UiDisabled
from ui_extras.ecs import Commands, World
from ui_extras.errors import EntityNotFoundError, ResourceNotFoundError


@dataclass
class Health:
    value: int


@dataclass
class Name:
    text: str


def test_spawn_get_and_despawn() -> None:
    world = World()
    entity = world.spawn(Health(10), Name("orc"))

    assert world.contains(entity)
    assert world.entities() == [entity]
    assert world.get(entity, Health) == Health(10)
    assert world.has(entity, Name)

    assert world.despawn(entity) is True
    assert world.despawn(entity) is False
    assert world.get(entity, Health) is None
    assert not world.contains(entity)


def test_despawned_index_is_reused_with_new_generation() -> None:
    world = World()
    first = world.spawn(Health(1))
    world.despawn(first)
    second = world.spawn(Health(2))

    assert second.index == first.index
    assert second.generation == first.generation + 1
    assert second != first
    assert not world.contains(first)


def test_insert_on_missing_entity_raises() -> None:
    world = World()
    entity = world.spawn()
    world.despawn(entity)

    with pytest.raises(EntityNotFoundError):
        world.insert(entity, Health(1))


def test_component_types_are_rejected() -> None:
    world = World()
    entity = world.spawn()

    with pytest.raises(TypeError):
        world.insert(entity, UiDisabled)


def test_change_detection_respects_suppressed_writes() -> None:
    world = World()
    entity = world.spawn(Health(10))
    since = world.increment_change_tick()

    world.get_mut(entity, Health, notify=False).value = 5
    assert not world.is_changed(entity, Health, since)
    assert world.get(entity, Health).value == 5

    world.set(entity, Health(3), notify=False)
    assert not world.is_changed(entity, Health, since)

    world.get_mut(entity, Health).value = 1
    assert world.is_changed(entity, Health, since)


def test_query_filters_changed_and_without() -> None:
    world = World()
    plain = world.spawn(Interaction.NONE)
    disabled = world.spawn(Interaction.NONE, UiDisabled())
    untouched = world.spawn(Interaction.NONE)
    since = world.increment_change_tick()

    world.set(plain, Interaction.PRESSED)
    world.set(disabled, Interaction.PRESSED)

    changed = [entity for entity, _ in world.query(Interaction, changed=Interaction, since=since)]
    assert changed == [plain, disabled]

    enabled = [
        entity
        for entity, _ in world.query(Interaction, changed=Interaction, without=(UiDisabled,), since=since)
    ]
    assert enabled == [plain]
    assert untouched not in enabled


def test_query_skips_entities_despawned_during_iteration() -> None:
    world = World()
    entities = [world.spawn(Health(i)) for i in range(3)]

    seen = []
    for entity, health in world.query(Health):
        seen.append(health.value)
        if entity == entities[0]:
            world.despawn(entities[1])

    assert seen == [0, 2]


def test_resources() -> None:
    world = World()
    world.insert_resource(Health(7))

    assert world.resource(Health).value == 7
    assert world.contains_resource(Health)
    assert world.remove_resource(Health) == Health(7)
    assert world.get_resource(Health) is None
    with pytest.raises(ResourceNotFoundError):
        world.resource(Health)


def test_commands_apply_in_order_and_skip_missing_entities() -> None:
    world = World()
    target = world.spawn(Health(1))
    commands = Commands(world)

    spawned = commands.spawn(Name("later"))
    commands.insert(spawned, Health(4))
    commands.despawn(target)
    commands.insert(target, Name("ghost"))

    assert not world.contains(spawned)
    assert len(commands) == 4

    commands.apply(world)

    assert world.get(spawned, Name) == Name("later")
    assert world.get(spawned, Health) == Health(4)
    assert not world.contains(target)
    assert len(commands) == 0


def test_run_clicommand_without_console_is_a_no_op(caplog) -> None:
    world = World()

    assert world.run_clicommand("echo hi") is None
    assert "cli_interpreter_missing" in caplog.text


def test_mark_changed_stamps_existing_component() -> None:
    world = World()
    entity = world.spawn(Health(1))
    since = world.increment_change_tick()

    world.mark_changed(entity, Health)

    assert world.is_changed(entity, Health, since)
    with pytest.raises(KeyError):
        world.mark_changed(entity, Name)


def test_commands_add_runs_custom_write() -> None:
    world = World()
    commands = Commands(world)

    commands.add(lambda target: target.insert_resource(Health(9)))
    assert world.get_resource(Health) is None

    commands.apply(world)
    assert world.resource(Health) == Health(9)


def test_commands_clear_drops_writes_and_releases_reserved_ids() -> None:
    world = World()
    commands = Commands(world)

    pending = commands.spawn(Name("never"))
    commands.add(lambda target: target.insert_resource(Health(1)))
    commands.clear()
    commands.apply(world)

    assert len(world) == 0
    assert world.get_resource(Health) is None
    reused = world.spawn(Name("real"))
    assert reused.index == pending.index
    assert reused.generation == pending.generation + 1
