"""
Configuration management for the Taskboard backend.

Settings come from environment variables (``TASKBOARD_`` prefix) layered over
an optional ``config.yaml`` in the project root.
"""

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings."""

    # API Settings
    api_title: str = "Taskboard API"
    api_version: str = "1.0.0"
    api_description: str = "Users and tasks API with MongoDB persistence and fallback data"

    # Server Settings
    host: str = "127.0.0.1"
    port: int = 5000
    environment: str = "development"
    log_level: str = "INFO"

    # CORS Settings
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    client_url: str | None = None

    # Database Settings
    mongo_uri: str | None = None
    mongo_database: str = "taskboard"
    server_selection_timeout_ms: int = 5000
    socket_timeout_ms: int = 45000
    ipv4_only: bool = True

    # Rate limiting
    rate_limit_enabled: bool = True
    read_rate_limit: str = "120/minute"
    write_rate_limit: str = "30/minute"

    # Built frontend served in production
    frontend_dist: str = str(PROJECT_ROOT / "frontend" / "dist")

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        yaml_file=PROJECT_ROOT / "config.yaml",
    )

    @field_validator("mongo_uri", "client_url")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over config.yaml
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins including the configured client URL."""
        origins = list(self.cors_origins)
        if self.client_url and self.client_url not in origins:
            origins.append(self.client_url)
        return origins


def get_settings() -> Settings:
    """
    Get application settings.

    The conventional ``MONGO_URI`` and ``DATABASE_URL`` variables are honoured
    in that order (first non-empty one wins) and override any prefixed or
    config file value, as does ``CLIENT_URL``.

    Returns:
        Settings instance
    """
    settings = Settings()

    env_uri = os.environ.get("MONGO_URI") or os.environ.get("DATABASE_URL")
    if env_uri:
        settings.mongo_uri = env_uri

    client_url = os.environ.get("CLIENT_URL")
    if client_url:
        settings.client_url = client_url

    return settings


# Global settings instance
settings = get_settings()
