# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
integration service. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from integracao.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.moodle.rest_url)
    'http://localhost:8080/webservice/rest/server.php'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration for the mapping store.

    The database only holds bookkeeping rows binding gestor ids to
    platform ids. The platform keeps its own storage.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        dsn: Optional full connection URL overriding the components.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "integracao"
    password: SecretStr = SecretStr("integracao_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "integracao"
    dsn: str | None = None
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.dsn:
            return self.dsn
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def sync_url(self) -> str:
        """Build the sync database URL for migrations."""
        pwd = self.password.get_secret_value()
        return f"postgresql://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class MoodleSettings(BaseSettings):
    """Moodle web service configuration.

    Attributes:
        base_url: Moodle site root.
        token: Web service token of the integration user.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOODLE_",
        extra="ignore",
    )

    base_url: str = "http://localhost:8080"
    token: SecretStr = SecretStr("")
    timeout: float = 30.0

    @property
    def rest_url(self) -> str:
        """Build the REST server endpoint URL."""
        return f"{self.base_url.rstrip('/')}/webservice/rest/server.php"


class RoleSettings(BaseSettings):
    """Platform role ids used for enrolments.

    Attributes:
        student: Role for active students.
        teacher: Role for discipline teachers.
        tutor_presencial: Role for on-site tutors.
        tutor_distancia: Role for distance tutors.
        status_roles: Enrolment status in the gestor mapped to a role id.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROLE_",
        extra="ignore",
    )

    student: int = 5
    teacher: int = 3
    tutor_presencial: int = 4
    tutor_distancia: int = 4
    status_roles: dict[str, int] = Field(
        default_factory=lambda: {
            "cursando": 5,
            "concluido": 9,
            "reprovado": 9,
            "evadido": 9,
            "desistente": 9,
            "cancelado": 9,
            "trancado": 9,
            "transferido": 9,
        }
    )

    def tutor_role(self, tipo_tutoria: str) -> int:
        """Get the role id for a tutoring type ("presencial" or "distancia")."""
        if tipo_tutoria == "presencial":
            return self.tutor_presencial
        return self.tutor_distancia


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        db: Mapping store database settings.
        moodle: Moodle web service settings.
        roles: Platform role ids.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    moodle: MoodleSettings = Field(default_factory=MoodleSettings)
    roles: RoleSettings = Field(default_factory=RoleSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production without a Moodle token.
        """
        if self.environment == "production" and not self.moodle.token.get_secret_value():
            raise ValueError(
                "Moodle web service token must be set in production. "
                "Set MOODLE_TOKEN environment variable."
            )
        return self

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

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
