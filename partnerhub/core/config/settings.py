# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are loaded from environment variables with sensible defaults.
The Settings class aggregates all subsettings; a cached instance is
provided via get_settings().

Example:
    >>> from partnerhub.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.progress.completion_threshold
    0.9
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration for the entity store.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "partnerhub"
    password: SecretStr = SecretStr("partnerhub_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "partnerhub"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class ProgressSettings(BaseSettings):
    """Progress aggregation configuration.

    Attributes:
        completion_threshold: Fraction of a lecture's duration that counts
            as watched to completion, even without an explicit completed flag.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROGRESS_",
        extra="ignore",
    )

    completion_threshold: float = Field(default=0.9, gt=0.0, le=1.0)


class PartnerSettings(BaseSettings):
    """White-label branding configuration.

    Attributes:
        default_app_name: App name shown outside partner mode.
        app_name_suffix: Appended to the college name in partner mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARTNER_",
        extra="ignore",
    )

    default_app_name: str = "PartnerHub Learning"
    app_name_suffix: str = "Digital Library"


class Settings(BaseSettings):
    """Main settings class.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Entity store database settings.
        progress: Progress aggregation settings.
        partner: White-label branding settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    progress: ProgressSettings = Field(default_factory=ProgressSettings)
    partner: PartnerSettings = Field(default_factory=PartnerSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or after changing environment variables.
    """
    get_settings.cache_clear()
