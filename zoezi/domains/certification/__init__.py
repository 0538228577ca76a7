# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certification domain package.

This package provides exam records, GPA calculation and graduation.
"""

from zoezi.domains.certification.grading import (
    compute_gpa,
    final_grade,
    grade_points,
    has_failing_grade,
)
from zoezi.domains.certification.service import CertificationService
from zoezi.domains.errors import (
    AlreadyGraduatedError,
    EnrollmentNotFoundError,
    ExamNotFoundError,
    FailingGradeError,
    GraduationBlockedError,
    GroupCourseMismatchError,
    IncompleteCourseworkError,
    NoExamRecordsError,
    NotGroupMemberError,
    PaymentIncompleteError,
)

__all__ = [
    "CertificationService",
    "compute_gpa",
    "final_grade",
    "grade_points",
    "has_failing_grade",
    "AlreadyGraduatedError",
    "EnrollmentNotFoundError",
    "ExamNotFoundError",
    "FailingGradeError",
    "GraduationBlockedError",
    "GroupCourseMismatchError",
    "IncompleteCourseworkError",
    "NoExamRecordsError",
    "NotGroupMemberError",
    "PaymentIncompleteError",
]
