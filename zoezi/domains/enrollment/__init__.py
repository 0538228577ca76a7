# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides course enrollment for students and alumni.
"""

from zoezi.domains.enrollment.service import (
    EnrollmentService,
    enrollment_to_response,
    exam_to_record,
    resolve_payment_status,
)
from zoezi.domains.errors import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    LearnerNotFoundError,
)

__all__ = [
    "EnrollmentService",
    "enrollment_to_response",
    "exam_to_record",
    "resolve_payment_status",
    "AlreadyEnrolledError",
    "CourseNotFoundError",
    "LearnerNotFoundError",
]
