"""enrollsync.

Enrollment reconciliation for class assignment screens: fetches the class
catalog and a student's enrollments, keeps a disjoint enrolled/available
partition and applies verified bulk enroll/unenroll results to it.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
