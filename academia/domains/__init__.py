# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain layer for the Academia API.

Subpackages:
- auth: Roles, session tokens, password hashing and the auth gate
- school: School registration
- management: Management staff
- class_: Class sections and resources
- teacher: Teachers
- student: Students and exam results
- attendance: Daily attendance
"""
