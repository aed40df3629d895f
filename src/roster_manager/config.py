from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Roster settings, overridable through ``ROSTER_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    roster_path: str = Field("roster.yaml", description="YAML file holding the roster")
    log_level: str = Field("WARNING", description="Root log level for the CLI")


@lru_cache
def get_settings() -> Settings:
    return Settings()
