# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Backend capabilities the enrollment layer depends on.

Payloads are returned in the backend's native shape; the catalog adapter
normalizes them. A backend that does not implement an operation raises
UnsupportedOperationError (or NotImplementedError) from it.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ClassCatalogSource(Protocol):
    """Source of the full class catalog."""

    async def list_all(self) -> Any:
        """Return every class, in upstream shape."""
        ...


@runtime_checkable
class EnrollmentSource(Protocol):
    """Source and sink of a student's enrollments."""

    async def list_for_student(self, student_id: str) -> Any:
        """Return the classes (or class ids) a student is enrolled in."""
        ...

    async def enroll(self, student_id: str, class_id: str) -> None:
        """Enroll a student in one class."""
        ...

    async def unenroll(self, student_id: str, class_id: str) -> None:
        """Remove a student from one class."""
        ...


@runtime_checkable
class StudentDirectory(Protocol):
    """Lookup of student identity for display."""

    async def get_student(self, student_id: str) -> Any:
        """Return the student payload, or None if unknown."""
        ...
