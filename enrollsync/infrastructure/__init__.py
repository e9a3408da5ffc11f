# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for backend integrations.

This package contains:
- memory: In-process class catalog, enrollment and student backend
"""
