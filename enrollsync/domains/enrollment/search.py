# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Free-text filtering of available classes."""

from enrollsync.domains.enrollment.partition import EnrollmentPartition
from enrollsync.models.catalog import ClassRecord


def _matches(record: ClassRecord, needle: str) -> bool:
    return needle in record.name.casefold() or needle in (record.subject or "").casefold()


def filter_available(partition: EnrollmentPartition, query: str | None) -> list[ClassRecord]:
    """Filter the available classes by name or subject.

    Matching is a case-insensitive substring test. A blank query returns
    every available class. Results keep catalog order and the partition
    is not modified.

    Args:
        partition: Partition to read from.
        query: Free-text search.

    Returns:
        Matching available classes.
    """
    available = partition.available_list()
    needle = (query or "").strip().casefold()
    if not needle:
        return available
    return [record for record in available if _matches(record, needle)]
