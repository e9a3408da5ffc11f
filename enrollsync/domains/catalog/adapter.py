# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Canonical model adapter.

Maps the entity shapes returned by different endpoints onto ClassRecord
and StudentRecord. Known class shapes:

- flat: ``{"id", "name", "subject", "tutorId", "tutorName", "schedule"}``
- nested: ``{"classId", "className", "tutor": {"tutorId", "name"}}``
- snake_case variants of both

All functions here are pure and total: malformed input produces defaults
or None, never an exception.
"""

from collections.abc import Mapping
from typing import Any

from enrollsync.models.catalog import DEFAULT_CLASS_NAME, ClassRecord, StudentRecord

CLASS_ID_KEYS = ("id", "classId", "class_id")
CLASS_NAME_KEYS = ("name", "className", "class_name", "title")
TUTOR_ID_KEYS = ("tutorId", "tutor_id")
TUTOR_NAME_KEYS = ("tutorName", "tutor_name")


def normalize_id(value: Any) -> str | None:
    """Normalize an upstream identity value to its canonical string.

    Upstream sends the same id as a number or a string, sometimes padded
    with whitespace. Booleans and containers are never identities.

    Args:
        value: Raw id value.

    Returns:
        Canonical id string, or None if the value carries no identity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str | None:
    """Coerce a scalar to stripped text; anything else becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and value == value and value not in (float("inf"), float("-inf")):
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def _days(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(day for day in (_text(v) for v in value) if day)
    day = _text(value)
    return (day,) if day else ()


def _subject(value: Any) -> str | None:
    if isinstance(value, Mapping):
        return _text(_first(value, ("name", "subjectName", "title")))
    return _text(value)


def extract_class_id(raw: Any) -> str | None:
    """Get the class identity from a class payload or a bare id.

    Enrollment lists come back either as class objects or as plain ids.

    Args:
        raw: Class mapping, or a scalar id.

    Returns:
        Canonical id, or None.
    """
    if isinstance(raw, ClassRecord):
        return raw.id
    if isinstance(raw, Mapping):
        for key in CLASS_ID_KEYS:
            class_id = normalize_id(raw.get(key))
            if class_id is not None:
                return class_id
        return None
    return normalize_id(raw)


def normalize_class(raw: Any) -> ClassRecord | None:
    """Map an upstream class payload to a ClassRecord.

    Args:
        raw: Upstream payload of any type.

    Returns:
        ClassRecord, or None when the payload has no usable identity.
    """
    if not isinstance(raw, Mapping):
        return None

    class_id = extract_class_id(raw)
    if class_id is None:
        return None

    tutor = raw.get("tutor")
    tutor = tutor if isinstance(tutor, Mapping) else {}

    return ClassRecord(
        id=class_id,
        name=_text(_first(raw, CLASS_NAME_KEYS)) or DEFAULT_CLASS_NAME,
        subject=_subject(raw.get("subject")),
        tutor_id=normalize_id(_first(raw, TUTOR_ID_KEYS))
        or normalize_id(_first(tutor, ("tutorId", "tutor_id", "id"))),
        tutor_name=_text(_first(raw, TUTOR_NAME_KEYS)) or _text(tutor.get("name")),
        schedule=_text(raw.get("schedule")),
        days=_days(raw.get("days")),
        start_time=_text(_first(raw, ("startTime", "start_time"))),
        end_time=_text(_first(raw, ("endTime", "end_time"))),
        capacity=_count(raw.get("capacity")),
        enrolled_count=_count(_first(raw, ("enrolled", "enrolledCount", "enrolled_count"))),
        status=_text(raw.get("status")) or "active",
        description=_text(raw.get("description")) or "",
    )


def normalize_student(raw: Any, student_id: str) -> StudentRecord:
    """Map an upstream student payload to a StudentRecord.

    Returns a placeholder identity (``Unknown Student``) when the payload
    is missing, empty or not a mapping. The placeholder always carries the
    requested ``student_id`` so it stays addressable.

    Args:
        raw: Upstream payload, possibly None.
        student_id: Id the caller asked for.

    Returns:
        StudentRecord; check ``placeholder`` to detect the fallback.
    """
    requested_id = normalize_id(student_id) or str(student_id)
    if not isinstance(raw, Mapping) or not raw:
        return StudentRecord.placeholder_for(requested_id)

    record_id = normalize_id(_first(raw, ("id", "studentId", "student_id", "userId"))) or requested_id
    first_name = _text(_first(raw, ("firstName", "first_name")))
    last_name = _text(_first(raw, ("lastName", "last_name")))
    if first_name is None and last_name is None:
        return StudentRecord.placeholder_for(requested_id)

    active = raw.get("active")
    if not isinstance(active, bool):
        status = _text(raw.get("status"))
        active = status is None or status.lower() == "active"

    return StudentRecord(
        id=record_id,
        first_name=first_name or "",
        last_name=last_name or "",
        email=_text(raw.get("email")),
        active=active,
    )
