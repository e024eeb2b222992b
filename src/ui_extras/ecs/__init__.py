"""Minimal entity/component runtime hosting the click dispatcher."""

from .commands import Commands
from .schedule import App, Plugin, Schedule, SystemSet
from .system import FunctionSystem, System, into_system
from .world import Entity, World

__all__ = [
    "App",
    "Commands",
    "Entity",
    "FunctionSystem",
    "Plugin",
    "Schedule",
    "System",
    "SystemSet",
    "World",
    "into_system",
]
