"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Timer host configuration. All values come from environment variables."""

    # Timer function
    timer_schedule: str = Field(default="0 */5 * * * *")
    timer_run_on_startup: bool = Field(default=True)

    # Scheduler
    scheduler_timezone: str = Field(default="UTC")
    past_due_tolerance_seconds: float = Field(default=1.0, ge=0)

    # Schedule monitor (persisted last/next occurrences)
    schedule_monitor_enabled: bool = Field(default=True)
    schedule_monitor_path: Path = Field(default=Path("data/schedule_status.db"))

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def app_settings(self) -> dict[str, str]:
        """Return settings as an ``UPPER_CASE`` name -> string mapping.

        Used to resolve ``%NAME%`` placeholders in registration options.
        """
        return {name.upper(): str(value) for name, value in self.model_dump().items()}


settings = Settings()
