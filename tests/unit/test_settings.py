# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest

from enrollsync.core.config.settings import (
    EnrollmentSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestEnrollmentSettings:
    """Tests for EnrollmentSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = EnrollmentSettings()

        assert settings.call_timeout == 15.0
        assert settings.fetch_timeout == 30.0
        assert settings.max_concurrency == 0
        assert settings.cache_catalog is True
        assert settings.concurrency_limit is None

    def test_loads_from_environment(self) -> None:
        """Test that settings load from environment variables."""
        env = {
            "ENROLLMENT_CALL_TIMEOUT": "2.5",
            "ENROLLMENT_MAX_CONCURRENCY": "4",
            "ENROLLMENT_CACHE_CATALOG": "false",
        }

        with patch.dict(os.environ, env, clear=False):
            settings = EnrollmentSettings()

        assert settings.call_timeout == 2.5
        assert settings.call_deadline == 2.5
        assert settings.concurrency_limit == 4
        assert settings.cache_catalog is False

    def test_non_positive_timeouts_disable_deadlines(self) -> None:
        """Test zero timeouts mean no deadline."""
        settings = EnrollmentSettings(call_timeout=0, fetch_timeout=-1)

        assert settings.call_deadline is None
        assert settings.fetch_deadline is None

    def test_negative_concurrency_rejected(self) -> None:
        """Test a negative concurrency limit is a validation error."""
        with pytest.raises(ValueError):
            EnrollmentSettings(max_concurrency=-1)


class TestSettings:
    """Tests for main Settings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.is_development is True
        assert settings.is_production is False

    def test_subsettings_loaded(self) -> None:
        """Test nested enrollment settings are built."""
        settings = Settings(_env_file=None)

        assert isinstance(settings.enrollment, EnrollmentSettings)

    def test_get_settings_cached(self) -> None:
        """Test get_settings returns the same instance until cleared."""
        first = get_settings()

        assert get_settings() is first

        clear_settings_cache()

        assert get_settings() is not first
