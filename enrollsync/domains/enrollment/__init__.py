# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides student enrollment reconciliation including:
- Enrolled/available partitioning of the class catalog
- Searching available classes
- Concurrent bulk enroll/unenroll with per-class outcomes
- A per-student session applying only verified results
"""

from enrollsync.domains.enrollment.coordinator import AssignmentCoordinator
from enrollsync.domains.enrollment.partition import EnrollmentPartition, partition
from enrollsync.domains.enrollment.search import filter_available
from enrollsync.domains.enrollment.service import EnrollmentSession
from enrollsync.domains.enrollment.sources import (
    ClassCatalogSource,
    EnrollmentSource,
    StudentDirectory,
)

__all__ = [
    "AssignmentCoordinator",
    "EnrollmentPartition",
    "partition",
    "filter_available",
    "EnrollmentSession",
    "ClassCatalogSource",
    "EnrollmentSource",
    "StudentDirectory",
]
