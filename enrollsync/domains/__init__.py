# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for enrollsync.

Domains:
    catalog: Canonical class/student models from upstream payloads and
        resilient collection fetching.
    enrollment: Enrollment partitioning, search, bulk assignment and the
        per-student session that ties them together.
"""
