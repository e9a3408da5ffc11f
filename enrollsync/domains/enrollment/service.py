# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment session for assigning one student to classes.

This module provides the EnrollmentSession class for:
- Loading the catalog, the student's enrollments and the student record
- Keeping the enrolled/available partition in sync with verified results
- Bulk and single enroll/unenroll
- Searching the available classes

A session owns its partition exclusively. Switching to another student
replaces the partition and discards results of calls still in flight.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from enrollsync.core.config.settings import EnrollmentSettings, get_settings
from enrollsync.core.errors import UnsupportedOperationError, classify_error, describe_error
from enrollsync.domains.catalog.adapter import (
    extract_class_id,
    normalize_class,
    normalize_id,
    normalize_student,
)
from enrollsync.domains.catalog.fetcher import fetch_collection
from enrollsync.domains.enrollment.coordinator import AssignmentCoordinator
from enrollsync.domains.enrollment.partition import EnrollmentPartition, partition
from enrollsync.domains.enrollment.search import filter_available
from enrollsync.domains.enrollment.sources import (
    ClassCatalogSource,
    EnrollmentSource,
    StudentDirectory,
)
from enrollsync.models.catalog import ClassRecord, StudentRecord
from enrollsync.models.enrollment import (
    AssignmentAction,
    AssignmentOutcome,
    AssignmentSummary,
    ErrorKind,
    LoadReport,
)
from enrollsync.utils.logging import bound_context

logger = logging.getLogger(__name__)


def _require_student_id(student_id: Any) -> str:
    normalized = normalize_id(student_id)
    if normalized is None:
        raise ValueError("A student id is required")
    return normalized


class EnrollmentSession:
    """Enrollment state and operations for one student.

    Attributes:
        partition: Current enrolled/available partition.
        student: Loaded student record, None before load().
        last_report: Report of the most recent load().

    Example:
        >>> session = EnrollmentSession("42", backend, backend, student_directory=backend)
        >>> report = await session.load()
        >>> summary = await session.enroll(["1", "2"])
        >>> summary.message
        '2 of 2 classes enrolled'
    """

    def __init__(
        self,
        student_id: str,
        catalog_source: ClassCatalogSource,
        enrollment_source: EnrollmentSource,
        *,
        student_directory: StudentDirectory | None = None,
        settings: EnrollmentSettings | None = None,
        coordinator: AssignmentCoordinator | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            student_id: Student whose enrollments are managed.
            catalog_source: Class catalog backend.
            enrollment_source: Enrollment backend.
            student_directory: Optional student lookup backend.
            settings: Enrollment settings, application settings by default.
            coordinator: Bulk coordinator, built from settings by default.

        Raises:
            ValueError: If student_id is blank.
        """
        self._student_id = _require_student_id(student_id)
        self._catalog_source = catalog_source
        self._enrollment_source = enrollment_source
        self._student_directory = student_directory
        self._settings = settings or get_settings().enrollment
        self._coordinator = coordinator or AssignmentCoordinator(
            call_timeout=self._settings.call_deadline,
            max_concurrency=self._settings.concurrency_limit,
        )

        self.partition = EnrollmentPartition.empty()
        self.student: StudentRecord | None = None
        self.last_report: LoadReport | None = None

        self._generation = 0
        self._cached_catalog: list[ClassRecord] | None = None
        self._unsupported: set[AssignmentAction] = set()

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def loaded(self) -> bool:
        return self.last_report is not None

    @property
    def can_enroll(self) -> bool:
        """False once the backend reported enrolling as unsupported."""
        return AssignmentAction.ENROLL not in self._unsupported

    @property
    def can_unenroll(self) -> bool:
        """False once the backend reported unenrolling as unsupported."""
        return AssignmentAction.UNENROLL not in self._unsupported

    def switch_student(self, student_id: str) -> None:
        """Start managing another student.

        The partition is replaced with an empty one; call load() next.
        Results of operations started for the previous student are
        discarded when they complete.

        Args:
            student_id: New student id.

        Raises:
            ValueError: If student_id is blank.
        """
        new_id = _require_student_id(student_id)
        logger.info("Switching enrollment session: %s -> %s", self._student_id, new_id)
        self._student_id = new_id
        self._generation += 1
        self.partition = EnrollmentPartition.empty()
        self.student = None
        self.last_report = None

    async def load(self) -> LoadReport:
        """Fetch the catalog, enrollments and student, and rebuild the partition.

        The three fetches run concurrently. None of them raises: failures
        are reported in the returned LoadReport.

        Returns:
            LoadReport describing what was loaded.
        """
        generation = self._generation
        student_id = self._student_id
        timeout = self._settings.fetch_deadline

        with bound_context(student_id=student_id):
            catalog_result, enrolled_result, student = await asyncio.gather(
                fetch_collection(
                    self._catalog_source.list_all,
                    normalize_class,
                    name="classes",
                    timeout=timeout,
                ),
                fetch_collection(
                    lambda: self._enrollment_source.list_for_student(student_id),
                    extract_class_id,
                    name="enrollments",
                    timeout=timeout,
                ),
                self._load_student(student_id),
            )

            catalog = catalog_result.items
            used_cached_catalog = False
            if catalog_result.degraded:
                if self._settings.cache_catalog and self._cached_catalog is not None:
                    catalog = self._cached_catalog
                    used_cached_catalog = True
                    logger.warning("Catalog fetch degraded; using %d cached classes", len(catalog))
            else:
                self._cached_catalog = catalog

            # Without any catalog the enrollments cannot be checked, so they
            # are reported as unverified rather than as stale.
            unverified: list[str] = []
            enrolled_ids = enrolled_result.items
            if catalog_result.degraded and not used_cached_catalog:
                unverified = list(dict.fromkeys(enrolled_result.items))
                enrolled_ids = []
                if unverified:
                    logger.warning(
                        "Catalog unavailable; %d enrollments left unverified",
                        len(unverified),
                    )

            result = partition(catalog, enrolled_ids)
            report = LoadReport(
                catalog_degraded=catalog_result.degraded,
                enrollments_degraded=enrolled_result.degraded,
                student_degraded=student.placeholder,
                used_cached_catalog=used_cached_catalog,
                dropped_records=catalog_result.dropped + enrolled_result.dropped,
                inconsistencies=list(result.inconsistencies),
                unverified_enrollments=unverified,
                warnings=list(result.warnings),
            )

            if generation != self._generation:
                logger.info("Discarding load for %s: student changed", student_id)
                return report

            self.partition = result
            self.student = student
            self.last_report = report

            logger.info(
                "Loaded enrollments: enrolled=%d, available=%d, degraded=%s",
                len(result.enrolled),
                len(result.available),
                report.degraded,
            )
            return report

    async def _load_student(self, student_id: str) -> StudentRecord:
        if self._student_directory is None:
            return StudentRecord.placeholder_for(student_id)

        try:
            timeout = self._settings.fetch_deadline
            if timeout is not None:
                raw = await asyncio.wait_for(self._student_directory.get_student(student_id), timeout=timeout)
            else:
                raw = await self._student_directory.get_student(student_id)
        except Exception as e:
            logger.warning(
                "Could not load student %s (%s): %s",
                student_id,
                classify_error(e).value,
                describe_error(e),
            )
            return StudentRecord.placeholder_for(student_id)

        student = normalize_student(raw, student_id)
        if student.placeholder:
            logger.warning("No usable data for student %s; using placeholder", student_id)
        return student

    def search(self, query: str | None) -> list[ClassRecord]:
        """Available classes matching a free-text query."""
        return filter_available(self.partition, query)

    async def enroll(
        self,
        class_ids: Iterable[Any],
        cancel: asyncio.Event | None = None,
    ) -> AssignmentSummary:
        """Enroll the student in several classes.

        Only classes whose call succeeded move to ``enrolled``.

        Args:
            class_ids: Class ids to enroll in.
            cancel: When set before the calls finish, results are not applied.

        Returns:
            AssignmentSummary with one outcome per distinct id.
        """
        return await self._assign(AssignmentAction.ENROLL, class_ids, cancel)

    async def unenroll(
        self,
        class_ids: Iterable[Any],
        cancel: asyncio.Event | None = None,
    ) -> AssignmentSummary:
        """Unenroll the student from several classes.

        Only classes whose call succeeded move back to ``available``.

        Args:
            class_ids: Class ids to unenroll from.
            cancel: When set before the calls finish, results are not applied.

        Returns:
            AssignmentSummary with one outcome per distinct id.
        """
        return await self._assign(AssignmentAction.UNENROLL, class_ids, cancel)

    async def enroll_class(self, class_id: Any) -> AssignmentOutcome:
        """Enroll the student in one class."""
        summary = await self.enroll([class_id])
        return summary.outcomes[0]

    async def unenroll_class(self, class_id: Any) -> AssignmentOutcome:
        """Unenroll the student from one class."""
        summary = await self.unenroll([class_id])
        return summary.outcomes[0]

    async def _assign(
        self,
        action: AssignmentAction,
        class_ids: Iterable[Any],
        cancel: asyncio.Event | None,
    ) -> AssignmentSummary:
        generation = self._generation
        student_id = self._student_id

        if action in self._unsupported:
            call = self._reject_unsupported
        elif action is AssignmentAction.ENROLL:
            call = self._enrollment_source.enroll
        else:
            call = self._enrollment_source.unenroll

        if action is AssignmentAction.ENROLL:
            outcomes = await self._coordinator.bulk_enroll(student_id, class_ids, call)
        else:
            outcomes = await self._coordinator.bulk_unenroll(student_id, class_ids, call)

        if any(o.error == ErrorKind.UNSUPPORTED for o in outcomes) and action not in self._unsupported:
            logger.warning("Backend does not support %s; disabling it", action.value)
            self._unsupported.add(action)

        if (cancel is not None and cancel.is_set()) or generation != self._generation:
            logger.info(
                "Discarding %s results for student %s: %s",
                action.value,
                student_id,
                "cancelled" if cancel is not None and cancel.is_set() else "student changed",
            )
            return AssignmentSummary(action=action, outcomes=outcomes, applied=False)

        summary = AssignmentSummary(action=action, outcomes=outcomes)
        succeeded = summary.succeeded_ids
        if action is AssignmentAction.ENROLL:
            moved = self.partition.mark_enrolled(succeeded)
        else:
            moved = self.partition.mark_unenrolled(succeeded)

        if len(moved) != len(succeeded):
            logger.info(
                "%d successful %s results did not change the partition",
                len(succeeded) - len(moved),
                action.value,
            )
        return summary

    async def _reject_unsupported(self, student_id: str, class_id: str) -> None:
        raise UnsupportedOperationError(
            "Operation disabled: backend reported it as unsupported",
            details={"student_id": student_id, "class_id": class_id},
        )
