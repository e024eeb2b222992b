"""Plugin wiring the click dispatcher into an app schedule."""

from __future__ import annotations

import logging

from ui_extras.config import Settings, settings as default_settings
from ui_extras.console import ConsoleCommands
from ui_extras.ecs.schedule import App
from ui_extras.onclick import ClickHandlerSet, OnClickDispatcher

logger = logging.getLogger("ui_extras.plugin")


class UiExtrasPlugin:
    """Registers the ``OnClick`` dispatcher in :data:`ClickHandlerSet`."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or default_settings

    def build(self, app: App) -> None:
        app.add_system(OnClickDispatcher(), in_set=ClickHandlerSet)
        if self._settings.cli_enabled and not app.world.contains_resource(ConsoleCommands):
            app.world.insert_resource(
                ConsoleCommands(
                    strict=self._settings.cli_strict,
                    history_size=self._settings.console_history_size,
                )
            )
        logger.debug("ui_extras_plugin_built", extra={"cli_enabled": self._settings.cli_enabled})
