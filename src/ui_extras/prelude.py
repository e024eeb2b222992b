"""Common imports for applications using ui-extras."""

from ui_extras.components import Interaction, UiDisabled
from ui_extras.ecs import App, Commands, Entity, World
from ui_extras.onclick import ClickHandlerSet, OnClick
from ui_extras.plugin import UiExtrasPlugin

__all__ = [
    "App",
    "ClickHandlerSet",
    "Commands",
    "Entity",
    "Interaction",
    "OnClick",
    "UiDisabled",
    "UiExtrasPlugin",
    "World",
]
