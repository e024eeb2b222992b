"""Interaction state and marker components shared with the host UI layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ui_extras.ecs.world import Entity, World


class Interaction(str, Enum):
    """Pointer interaction state of a UI node."""

    PRESSED = "pressed"
    HOVERED = "hovered"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class UiDisabled:
    """Marks a UI node as disabled; interaction handlers skip it."""


def press(world: World, entity: Entity) -> None:
    world.set(entity, Interaction.PRESSED)


def hover(world: World, entity: Entity) -> None:
    world.set(entity, Interaction.HOVERED)


def release(world: World, entity: Entity) -> None:
    world.set(entity, Interaction.NONE)
