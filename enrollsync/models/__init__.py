# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models shared across enrollsync domains."""

from enrollsync.models.catalog import (
    DEFAULT_CLASS_NAME,
    ClassRecord,
    StudentRecord,
)
from enrollsync.models.enrollment import (
    AssignmentAction,
    AssignmentOutcome,
    AssignmentStatus,
    AssignmentSummary,
    ErrorKind,
    LoadReport,
)

__all__ = [
    "DEFAULT_CLASS_NAME",
    "ClassRecord",
    "StudentRecord",
    "AssignmentAction",
    "AssignmentOutcome",
    "AssignmentStatus",
    "AssignmentSummary",
    "ErrorKind",
    "LoadReport",
]
