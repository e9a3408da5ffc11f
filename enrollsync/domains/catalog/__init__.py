# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog domain package.

This package provides:
- Canonical class and student records from heterogeneous payloads
- Resilient fetching of upstream collections
"""

from enrollsync.domains.catalog.adapter import (
    extract_class_id,
    normalize_class,
    normalize_id,
    normalize_student,
)
from enrollsync.domains.catalog.fetcher import FetchResult, fetch_collection

__all__ = [
    "extract_class_id",
    "normalize_class",
    "normalize_id",
    "normalize_student",
    "FetchResult",
    "fetch_collection",
]
