# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process enrollment backend.

Implements ClassCatalogSource, EnrollmentSource and StudentDirectory on
plain dictionaries. Used for development without a server and in tests.
Operations can be switched off to behave like a backend that only
partially implements the enrollment API.

Example:
    >>> backend = InMemoryBackend(
    ...     classes=[{"id": 1, "name": "Algebra"}],
    ...     students=[{"id": "42", "firstName": "Ada", "lastName": "L"}],
    ...     supports_unenroll=False,
    ... )
    >>> await backend.enroll("42", "1")
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from enrollsync.core.errors import (
    ClassNotFoundError,
    InvalidRequestError,
    StudentNotFoundError,
    UnsupportedOperationError,
)
from enrollsync.domains.catalog.adapter import extract_class_id, normalize_id

logger = logging.getLogger(__name__)


class InMemoryBackend:
    """Dictionary-backed class catalog, enrollment store and student directory.

    Catalog and student payloads are stored as given, so upstream shape
    variations can be reproduced. Enrollments are stored as class ids in
    enrollment order.

    Attributes:
        latency: Seconds each call sleeps before answering.
        calls: Log of ``(operation, student_id, class_id)`` for enroll/unenroll.
    """

    def __init__(
        self,
        classes: Iterable[Mapping[str, Any]] = (),
        students: Iterable[Mapping[str, Any]] = (),
        enrollments: Mapping[str, Iterable[Any]] | None = None,
        *,
        supports_enroll: bool = True,
        supports_unenroll: bool = True,
        supports_listing: bool = True,
        latency: float = 0.0,
    ) -> None:
        self._classes: list[dict[str, Any]] = [dict(c) for c in classes]
        self._students: dict[str, dict[str, Any]] = {}
        for student in students:
            student_id = normalize_id(student.get("id"))
            if student_id is not None:
                self._students[student_id] = dict(student)
        self._enrollments: dict[str, list[str]] = {}
        for student_id, class_ids in (enrollments or {}).items():
            self._enrollments[str(student_id)] = [str(c) for c in class_ids]

        self.supports_enroll = supports_enroll
        self.supports_unenroll = supports_unenroll
        self.supports_listing = supports_listing
        self.latency = latency
        self.calls: list[tuple[str, str, str]] = []

    def _class_ids(self) -> set[str]:
        return {class_id for class_id in map(extract_class_id, self._classes) if class_id}

    async def _pause(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    def enrolled_ids(self, student_id: str) -> list[str]:
        """Stored class ids for a student."""
        return list(self._enrollments.get(str(student_id), []))

    async def list_all(self) -> list[dict[str, Any]]:
        await self._pause()
        return [dict(c) for c in self._classes]

    async def list_for_student(self, student_id: str) -> list[str]:
        await self._pause()
        if not self.supports_listing:
            raise UnsupportedOperationError("Listing a student's classes is not supported")
        return self.enrolled_ids(student_id)

    async def get_student(self, student_id: str) -> dict[str, Any] | None:
        await self._pause()
        student = self._students.get(str(student_id))
        return dict(student) if student is not None else None

    def _check(self, student_id: str, class_id: str) -> tuple[str, str]:
        student = normalize_id(student_id)
        class_ = normalize_id(class_id)
        if student is None or class_ is None:
            raise InvalidRequestError("Student id and class id are required")
        if self._students and student not in self._students:
            raise StudentNotFoundError(f"Student {student} not found")
        if class_ not in self._class_ids():
            raise ClassNotFoundError(f"Class {class_} not found")
        return student, class_

    async def enroll(self, student_id: str, class_id: str) -> None:
        await self._pause()
        if not self.supports_enroll:
            raise UnsupportedOperationError("Enrolling is not supported")
        student, class_ = self._check(student_id, class_id)
        self.calls.append(("enroll", student, class_))
        enrolled = self._enrollments.setdefault(student, [])
        if class_ not in enrolled:
            enrolled.append(class_)
        logger.debug("Enrolled student %s in class %s", student, class_)

    async def unenroll(self, student_id: str, class_id: str) -> None:
        await self._pause()
        if not self.supports_unenroll:
            raise UnsupportedOperationError("Unenrolling is not supported")
        student, class_ = self._check(student_id, class_id)
        self.calls.append(("unenroll", student, class_))
        enrolled = self._enrollments.get(student, [])
        if class_ in enrolled:
            enrolled.remove(class_)
        logger.debug("Unenrolled student %s from class %s", student, class_)
