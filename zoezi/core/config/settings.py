# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the Zoezi
lifecycle core. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from zoezi.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """School database configuration.

    The database holds learners, tutors, courses, groups and the
    payment-gateway transaction ledger.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        url_override: Full connection URL, used verbatim when set.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "zoezi"
    password: SecretStr = SecretStr("zoezi_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "zoezi"
    pool_size: int = 10
    max_overflow: int = 20
    url_override: str | None = None

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Check whether the configured URL targets SQLite."""
        return self.url.startswith("sqlite")


class SMTPSettings(BaseSettings):
    """SMTP configuration for e-mail notifications.

    Attributes:
        host: SMTP server host. Empty disables the e-mail channel.
        port: SMTP server port.
        username: SMTP login user.
        password: SMTP login password.
        use_tls: Use STARTTLS when connecting.
        from_email: Sender address.
        from_name: Sender display name.
        timeout: Connection timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        extra="ignore",
    )

    host: str = ""
    port: int = 587
    username: str = ""
    password: SecretStr = SecretStr("")
    use_tls: bool = True
    from_email: str = "noreply@zoezi.ac.ke"
    from_name: str = "Zoezi School"
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        """Check if SMTP has enough configuration to send mail."""
        return bool(self.host and self.from_email)


class NotificationSettings(BaseSettings):
    """Lifecycle notification configuration.

    Attributes:
        enabled: Send lifecycle e-mails at all.
        portal_url: Learner portal link rendered into templates.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATIONS_",
        extra="ignore",
    )

    enabled: bool = False
    portal_url: str = "https://portal.zoezi.ac.ke"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment.
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        smtp: SMTP settings.
        notifications: Notification settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with notifications enabled
                but no SMTP server configured.
        """
        if self.environment == "production":
            if self.notifications.enabled and not self.smtp.is_configured:
                raise ValueError(
                    "Notifications are enabled but SMTP is not configured. "
                    "Set SMTP_HOST or NOTIFICATIONS_ENABLED=false."
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

    Call this if you need to reload settings from environment.
    """
    get_settings.cache_clear()
