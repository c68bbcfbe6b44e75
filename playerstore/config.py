import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

_CONFIG_PATH = os.getenv("PLAYERSTORE_CONFIG", "config.toml")
_ENV_PATH = os.getenv("PLAYERSTORE_ENV", ".env")


class ProfileDefaults(BaseModel):
    """Values given to a profile created on a player's first login."""

    group: str = "DEFAULT"
    tier: int = Field(default=0, ge=0)
    plot_limit: int = Field(default=1, ge=0)
    vote_credits: int = Field(default=0, ge=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PLAYERSTORE_",
        env_nested_delimiter="__",
        toml_file=_CONFIG_PATH,
        env_file=_ENV_PATH,
        extra="ignore",
    )

    database_url: str = "sqlite:///players.db"
    database_echo: bool = False
    api_token: Optional[str] = None
    index_timeout_seconds: float = 10.0
    defaults: ProfileDefaults = Field(default_factory=ProfileDefaults)

    host: str = "127.0.0.1"
    port: int = 5678
    logs_dir: Path = Field(default=Path("logs"))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Source order: init args > OS env > .env > config.toml > secrets
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()
