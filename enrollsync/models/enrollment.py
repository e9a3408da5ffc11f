# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment result models.

This module defines:
- ErrorKind: the failure taxonomy surfaced to callers
- AssignmentOutcome: per-class result of one enroll/unenroll call
- AssignmentSummary: aggregate of a bulk operation for display
- LoadReport: what the initial reconciliation fetch could and could not load
"""

from collections import Counter
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Failure kinds for upstream operations.

    - NOT_FOUND: Referenced student or class does not exist upstream
    - UNSUPPORTED: Operation not implemented by the current backend
    - NETWORK: Transport failure, no response
    - TIMEOUT: No response within the configured deadline
    - INVALID: Malformed request
    - FORBIDDEN: Caller is not allowed to perform the operation
    - UNKNOWN: Rejection that fits none of the above
    """

    NOT_FOUND = "not_found"
    UNSUPPORTED = "unsupported"
    NETWORK = "network"
    TIMEOUT = "timeout"
    INVALID = "invalid"
    FORBIDDEN = "forbidden"
    UNKNOWN = "unknown"


class AssignmentAction(str, Enum):
    """Bulk assignment direction."""

    ENROLL = "enroll"
    UNENROLL = "unenroll"

    @property
    def past_tense(self) -> str:
        return f"{self.value}ed"


class AssignmentStatus(str, Enum):
    """Result of one assignment call."""

    SUCCESS = "success"
    FAILURE = "failure"


class AssignmentOutcome(BaseModel):
    """Result of one enroll/unenroll call.

    Attributes:
        class_id: Normalized class id the call was made for.
        status: success or failure.
        error: Failure kind, set only on failure.
        message: Upstream error text, when one was available.
    """

    model_config = ConfigDict(frozen=True)

    class_id: str
    status: AssignmentStatus
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, class_id: str) -> "AssignmentOutcome":
        return cls(class_id=class_id, status=AssignmentStatus.SUCCESS)

    @classmethod
    def failure(
        cls,
        class_id: str,
        error: ErrorKind,
        message: str | None = None,
    ) -> "AssignmentOutcome":
        return cls(
            class_id=class_id,
            status=AssignmentStatus.FAILURE,
            error=error,
            message=message,
        )

    @property
    def succeeded(self) -> bool:
        return self.status == AssignmentStatus.SUCCESS


class AssignmentSummary(BaseModel):
    """Aggregate view of a bulk enroll/unenroll for presentation.

    Attributes:
        action: Direction of the operation.
        outcomes: One outcome per de-duplicated requested class id.
        applied: False when the results were discarded because the
            operation was cancelled or the student changed mid-flight.
    """

    action: AssignmentAction
    outcomes: list[AssignmentOutcome] = Field(default_factory=list)
    applied: bool = True

    @property
    def requested(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded_ids(self) -> list[str]:
        return [o.class_id for o in self.outcomes if o.succeeded]

    @property
    def failures(self) -> list[AssignmentOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def failures_by_kind(self) -> dict[ErrorKind, int]:
        """Failure counts per kind, most frequent first."""
        counts = Counter(o.error or ErrorKind.UNKNOWN for o in self.failures)
        return dict(counts.most_common())

    @property
    def message(self) -> str:
        """Human readable summary, e.g. ``3 of 5 classes enrolled; 2 failed: unsupported (2)``."""
        text = f"{len(self.succeeded_ids)} of {self.requested} classes {self.action.past_tense}"
        failures = self.failures_by_kind
        if failures:
            kinds = ", ".join(f"{kind.value} ({count})" for kind, count in failures.items())
            text += f"; {len(self.failures)} failed: {kinds}"
        if not self.applied:
            text += " (discarded)"
        return text


class LoadReport(BaseModel):
    """Result of loading a student's enrollment state.

    Attributes:
        catalog_degraded: The catalog fetch failed or returned a bad shape.
        enrollments_degraded: The student's enrollment fetch failed.
        student_degraded: The student record is a placeholder.
        used_cached_catalog: A previously loaded catalog was reused.
        dropped_records: Upstream records discarded for lacking an id.
        inconsistencies: Enrolled class ids missing from the catalog.
        unverified_enrollments: Enrolled class ids that could not be checked
            because no catalog was available.
        warnings: Non-fatal data quality notes.
    """

    catalog_degraded: bool = False
    enrollments_degraded: bool = False
    student_degraded: bool = False
    used_cached_catalog: bool = False
    dropped_records: int = 0
    inconsistencies: list[str] = Field(default_factory=list)
    unverified_enrollments: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.catalog_degraded or self.enrollments_degraded or self.student_degraded
