# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment domain package.

This package binds enrolled learners to tutors and groups:
- Tutor assignment and cancellation
- Group add, remove and transfer
"""

from zoezi.domains.assignment.service import AssignmentService
from zoezi.domains.errors import (
    AlreadyGraduatedError,
    DuplicateMembershipError,
    EnrollmentNotFoundError,
    GroupCourseMismatchError,
    GroupNotFoundError,
    NotGroupMemberError,
    TutorNotFoundError,
)

__all__ = [
    "AssignmentService",
    "AlreadyGraduatedError",
    "DuplicateMembershipError",
    "EnrollmentNotFoundError",
    "GroupCourseMismatchError",
    "GroupNotFoundError",
    "NotGroupMemberError",
    "TutorNotFoundError",
]
