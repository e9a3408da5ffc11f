# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for enrollsync.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings().

Example:
    >>> from enrollsync.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.enrollment.call_timeout)
    15.0
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnrollmentSettings(BaseSettings):
    """Enrollment reconciliation configuration.

    Attributes:
        call_timeout: Deadline in seconds for a single enroll/unenroll call.
            Zero or negative disables the deadline.
        fetch_timeout: Deadline in seconds for a collection fetch.
        max_concurrency: Upper bound on in-flight calls during a bulk
            operation. Zero means unbounded.
        cache_catalog: Reuse the last good catalog when a reload degrades.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENROLLMENT_",
        extra="ignore",
    )

    call_timeout: float = 15.0
    fetch_timeout: float = 30.0
    max_concurrency: int = 0
    cache_catalog: bool = True

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, value: int) -> int:
        """Reject negative concurrency limits."""
        if value < 0:
            raise ValueError("max_concurrency must be zero (unbounded) or positive")
        return value

    @property
    def call_deadline(self) -> float | None:
        """Per-call timeout, or None when disabled."""
        return self.call_timeout if self.call_timeout > 0 else None

    @property
    def fetch_deadline(self) -> float | None:
        """Fetch timeout, or None when disabled."""
        return self.fetch_timeout if self.fetch_timeout > 0 else None

    @property
    def concurrency_limit(self) -> int | None:
        """Concurrency bound, or None when unbounded."""
        return self.max_concurrency or None


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        environment: Deployment environment.
        debug: Enable debug mode.
        log_level: Logging level.
        enrollment: Enrollment reconciliation settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    enrollment: EnrollmentSettings = Field(default_factory=EnrollmentSettings)

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
    Useful for testing.
    """
    get_settings.cache_clear()
