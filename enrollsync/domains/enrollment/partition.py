# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment partitioner.

Splits the class catalog into the classes a student is enrolled in and
the classes still available to them. The two maps are disjoint by id and
only ever contain catalog classes; an enrollment pointing at a class the
catalog does not know is dropped and recorded, never fabricated.

Both maps are keyed by normalized id. List views follow catalog order,
which is what screens render, independent of how the maps were mutated.
"""

import logging
from collections.abc import Iterable
from typing import Any

from enrollsync.domains.catalog.adapter import extract_class_id, normalize_class
from enrollsync.models.catalog import ClassRecord

logger = logging.getLogger(__name__)


class EnrollmentPartition:
    """Enrolled/available split of the catalog for one student.

    Attributes:
        enrolled: Classes confirmed enrolled, by id.
        available: Catalog classes not in ``enrolled``, by id.
        inconsistencies: Enrolled ids that were missing from the catalog.
        warnings: Data quality notes (duplicate or unusable catalog rows).
    """

    def __init__(self) -> None:
        self.enrolled: dict[str, ClassRecord] = {}
        self.available: dict[str, ClassRecord] = {}
        self.inconsistencies: list[str] = []
        self.warnings: list[str] = []
        self._order: dict[str, int] = {}

    @classmethod
    def empty(cls) -> "EnrollmentPartition":
        """Partition with no catalog loaded yet."""
        return cls()

    @property
    def catalog_ids(self) -> list[str]:
        """Ids of the catalog this partition was built from, in catalog order."""
        return list(self._order)

    def __len__(self) -> int:
        return len(self.enrolled) + len(self.available)

    def is_enrolled(self, class_id: str) -> bool:
        """True if the class is on the enrolled side."""
        return class_id in self.enrolled

    def is_available(self, class_id: str) -> bool:
        """True if the class is on the available side."""
        return class_id in self.available

    def get(self, class_id: str) -> ClassRecord | None:
        """Look up a catalog class on either side."""
        return self.enrolled.get(class_id) or self.available.get(class_id)

    def _ordered(self, records: dict[str, ClassRecord]) -> list[ClassRecord]:
        return sorted(records.values(), key=lambda record: self._order[record.id])

    def enrolled_list(self) -> list[ClassRecord]:
        """Enrolled classes in catalog order."""
        return self._ordered(self.enrolled)

    def available_list(self) -> list[ClassRecord]:
        """Available classes in catalog order."""
        return self._ordered(self.available)

    def _move(
        self,
        class_ids: Iterable[str],
        source: dict[str, ClassRecord],
        target: dict[str, ClassRecord],
    ) -> list[str]:
        moved: list[str] = []
        for class_id in class_ids:
            record = source.pop(class_id, None)
            if record is None:
                continue
            target[class_id] = record
            moved.append(class_id)
        return moved

    def mark_enrolled(self, class_ids: Iterable[str]) -> list[str]:
        """Move classes from available to enrolled.

        Ids that are not currently available (already enrolled, or not in
        the catalog) are ignored.

        Args:
            class_ids: Normalized class ids.

        Returns:
            Ids actually moved.
        """
        class_ids = list(class_ids)
        moved = self._move(class_ids, self.available, self.enrolled)
        skipped = [class_id for class_id in class_ids if class_id not in moved]
        if skipped:
            logger.debug("Not moved to enrolled (not available): %s", skipped)
        return moved

    def mark_unenrolled(self, class_ids: Iterable[str]) -> list[str]:
        """Move classes from enrolled back to available.

        Args:
            class_ids: Normalized class ids.

        Returns:
            Ids actually moved.
        """
        class_ids = list(class_ids)
        moved = self._move(class_ids, self.enrolled, self.available)
        skipped = [class_id for class_id in class_ids if class_id not in moved]
        if skipped:
            logger.debug("Not moved to available (not enrolled): %s", skipped)
        return moved


def partition(
    catalog: Iterable[ClassRecord | Any],
    enrolled_raw: Iterable[Any],
) -> EnrollmentPartition:
    """Build the enrolled/available partition for one student.

    Args:
        catalog: Catalog classes, as ClassRecords or raw upstream payloads.
        enrolled_raw: The student's enrolled classes, as class payloads,
            ClassRecords or bare ids.

    Returns:
        New EnrollmentPartition.
    """
    result = EnrollmentPartition()
    catalog_map: dict[str, ClassRecord] = {}

    for raw in catalog:
        record = raw if isinstance(raw, ClassRecord) else normalize_class(raw)
        if record is None:
            result.warnings.append("Dropped catalog entry without a class id")
            continue
        if record.id in catalog_map:
            # Last write wins; position stays at the first occurrence.
            result.warnings.append(f"Duplicate catalog id {record.id}")
            logger.warning("Duplicate class id %s in catalog", record.id)
        else:
            result._order[record.id] = len(result._order)
        catalog_map[record.id] = record

    for raw in enrolled_raw:
        class_id = extract_class_id(raw)
        if class_id is None:
            result.warnings.append("Dropped enrollment without a class id")
            continue
        if class_id in result.enrolled:
            continue
        record = catalog_map.pop(class_id, None)
        if record is None:
            if class_id not in result.inconsistencies:
                result.inconsistencies.append(class_id)
                logger.warning("Enrolled class %s is not in the catalog; dropping it", class_id)
            continue
        result.enrolled[class_id] = record

    result.available = catalog_map

    logger.debug(
        "Partitioned catalog: enrolled=%d, available=%d, inconsistencies=%d",
        len(result.enrolled),
        len(result.available),
        len(result.inconsistencies),
    )
    return result
