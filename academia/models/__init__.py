# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for the Academia API.

Request fields are optional at the schema level. Services check presence
themselves so missing fields produce the API's own error messages instead
of a generic schema error.
"""
