# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from typing import Any

import pytest

from enrollsync.core.config.settings import EnrollmentSettings, clear_settings_cache
from enrollsync.infrastructure.memory import InMemoryBackend


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Make every test read settings fresh from the environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def enrollment_settings() -> EnrollmentSettings:
    """Provide enrollment settings with short deadlines for testing."""
    return EnrollmentSettings(
        call_timeout=1.0,
        fetch_timeout=1.0,
        max_concurrency=0,
        cache_catalog=True,
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_student_id() -> str:
    """Provide a sample student ID for testing."""
    return "42"


@pytest.fixture
def sample_classes() -> list[dict[str, Any]]:
    """Provide catalog payloads in both upstream shapes."""
    return [
        {"id": 1, "name": "Algebra", "subject": "Mathematics", "tutorName": "Ms. Perera"},
        {"id": "2", "name": "Biology", "subject": "Science"},
        {
            "classId": "3",
            "className": "Organic Chemistry",
            "subject": {"name": "Chemistry"},
            "tutor": {"tutorId": 7, "name": "Mr. Silva"},
        },
        {"id": "4", "name": "World History", "subject": None},
    ]


@pytest.fixture
def sample_student(sample_student_id: str) -> dict[str, Any]:
    """Provide a student payload."""
    return {
        "id": sample_student_id,
        "firstName": "Nimal",
        "lastName": "Fernando",
        "email": "nimal@example.com",
        "status": "active",
    }


@pytest.fixture
def backend(
    sample_classes: list[dict[str, Any]],
    sample_student: dict[str, Any],
    sample_student_id: str,
) -> InMemoryBackend:
    """Provide an in-memory backend where the student takes Algebra."""
    return InMemoryBackend(
        classes=sample_classes,
        students=[sample_student],
        enrollments={sample_student_id: ["1"]},
    )
