from __future__ import annotations

from ui_extras.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("UI_EXTRAS_CLI_ENABLED", raising=False)
    monkeypatch.delenv("UI_EXTRAS_LOG_LEVEL", raising=False)

    config = Settings(_env_file=None)

    assert config.app_name == "ui-extras"
    assert config.log_level == "INFO"
    assert config.cli_enabled is True
    assert config.cli_strict is False


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("UI_EXTRAS_CLI_ENABLED", "false")
    monkeypatch.setenv("UI_EXTRAS_CLI_STRICT", "1")
    monkeypatch.setenv("UI_EXTRAS_CONSOLE_HISTORY_SIZE", "5")

    config = Settings(_env_file=None)

    assert config.cli_enabled is False
    assert config.cli_strict is True
    assert config.console_history_size == 5
