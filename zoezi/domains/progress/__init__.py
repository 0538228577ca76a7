# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress domain package."""

from zoezi.domains.errors import ForbiddenError, GroupNotFoundError, TutorNotFoundError
from zoezi.domains.progress.service import ProgressService, completion_of

__all__ = [
    "ProgressService",
    "completion_of",
    "ForbiddenError",
    "GroupNotFoundError",
    "TutorNotFoundError",
]
