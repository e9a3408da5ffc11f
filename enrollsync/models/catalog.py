# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Canonical catalog models.

Upstream endpoints describe classes and students with different field
names. Everything downstream of the adapter works with these shapes only.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CLASS_NAME = "Unnamed Class"
PLACEHOLDER_FIRST_NAME = "Unknown"
PLACEHOLDER_LAST_NAME = "Student"


class ClassRecord(BaseModel):
    """Canonical representation of one class.

    Attributes:
        id: Normalized identity, unique within a catalog snapshot.
        name: Display name.
        subject: Subject name, if known.
        tutor_id: Assigned tutor identity.
        tutor_name: Assigned tutor display name.
        schedule: Free-form schedule text.
        days: Days the class meets.
        start_time: Start time text.
        end_time: End time text.
        capacity: Seat capacity, 0 when unknown.
        enrolled_count: Number of students enrolled upstream.
        status: Upstream lifecycle status.
        description: Long description.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = DEFAULT_CLASS_NAME
    subject: str | None = None
    tutor_id: str | None = None
    tutor_name: str | None = None
    schedule: str | None = None
    days: tuple[str, ...] = ()
    start_time: str | None = None
    end_time: str | None = None
    capacity: int = 0
    enrolled_count: int = 0
    status: str = "active"
    description: str = ""


class StudentRecord(BaseModel):
    """Minimal student identity and display fields.

    A placeholder record stands in when the upstream returned nothing
    usable; ``placeholder`` is set so callers can flag it as degraded.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str = PLACEHOLDER_FIRST_NAME
    last_name: str = PLACEHOLDER_LAST_NAME
    email: str | None = None
    active: bool = True
    placeholder: bool = Field(default=False)

    @classmethod
    def placeholder_for(cls, student_id: str) -> "StudentRecord":
        """Build the fallback identity for a student that could not be loaded."""
        return cls(
            id=student_id,
            first_name=PLACEHOLDER_FIRST_NAME,
            last_name=PLACEHOLDER_LAST_NAME,
            active=True,
            placeholder=True,
        )

    @property
    def display_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()
