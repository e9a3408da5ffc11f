# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for enrollsync.

Example:
    >>> from enrollsync.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.enrollment.max_concurrency
    0
"""

from enrollsync.core.config.settings import (
    EnrollmentSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "EnrollmentSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
