"""Runtime configuration for ui-extras."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="UI_EXTRAS_", env_file=".env", extra="ignore")

    app_name: str = "ui-extras"
    log_level: str = "INFO"
    cli_enabled: bool = Field(
        default=True,
        description="Install the console interpreter so OnClick.cli() actions can run.",
    )
    cli_strict: bool = Field(
        default=False,
        description="Raise instead of logging when a console command is not registered.",
    )
    console_history_size: int = Field(default=200, ge=1)


settings = Settings()
