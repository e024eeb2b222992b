from __future__ import annotations

from ui_extras.components import press
from ui_extras.prelude import App, Interaction, OnClick, UiDisabled, UiExtrasPlugin


def test_prelude_covers_basic_button_setup() -> None:
    app = App().add_plugins(UiExtrasPlugin())
    clicks = []
    enabled = app.world.spawn(Interaction.NONE, OnClick().system(lambda: clicks.append("enabled")))
    disabled = app.world.spawn(Interaction.NONE, OnClick().system(lambda: clicks.append("disabled")), UiDisabled())

    press(app.world, enabled)
    press(app.world, disabled)
    app.update()

    assert clicks == ["enabled"]
