# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lifecycle error hierarchy.

Every error carries a stable ``kind`` string that callers can map to a
response without matching on class names. The four graduation gates are
separate classes under GraduationBlockedError.
"""

from typing import Any

from zoezi.infrastructure.database.connection import TransactionAbortedError


class LifecycleError(Exception):
    """Base exception for lifecycle service errors.

    Attributes:
        message: Human-readable error description.
        details: Structured context for the caller.
    """

    kind = "lifecycle_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidRequestError(LifecycleError):
    """Raised when a request is malformed or conflicts with stored data."""

    kind = "invalid_request"


class DuplicateEmailError(InvalidRequestError):
    """Raised when an email address is already registered."""

    pass


class DuplicateCourseError(InvalidRequestError):
    """Raised when a course name is already taken."""

    pass


class ForbiddenError(LifecycleError):
    """Raised when an actor may not touch a record."""

    kind = "forbidden"


class NotFoundError(LifecycleError):
    """Raised when a referenced record does not exist."""

    kind = "not_found"


class LearnerNotFoundError(NotFoundError):
    """Raised when learner is not found."""

    pass


class TutorNotFoundError(NotFoundError):
    """Raised when tutor is not found."""

    pass


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    pass


class GroupNotFoundError(NotFoundError):
    """Raised when group is not found."""

    pass


class EnrollmentNotFoundError(NotFoundError):
    """Raised when a learner holds no enrollment for the course."""

    pass


class CurriculumItemNotFoundError(NotFoundError):
    """Raised when curriculum item is not found."""

    pass


class ResponseNotFoundError(NotFoundError):
    """Raised when item response is not found."""

    pass


class ExamNotFoundError(NotFoundError):
    """Raised when exam record is not found."""

    pass


class TransactionNotFoundError(NotFoundError):
    """Raised when payment transaction is not found."""

    pass


class AlreadyEnrolledError(LifecycleError):
    """Raised when learner is already enrolled in the course."""

    kind = "already_enrolled"


class DuplicateMembershipError(LifecycleError):
    """Raised when learner is already placed in a group for the course."""

    kind = "duplicate_membership"


class NotGroupMemberError(LifecycleError):
    """Raised when learner is not a member of the group."""

    kind = "not_group_member"


class GroupCourseMismatchError(LifecycleError):
    """Raised when a group belongs to a different course."""

    kind = "group_course_mismatch"


class ItemNotReleasedError(LifecycleError):
    """Raised when a curriculum item is not yet open to learners."""

    kind = "item_not_released"


class AlreadyGraduatedError(LifecycleError):
    """Raised when the enrollment has already graduated."""

    kind = "already_graduated"


class GraduationBlockedError(LifecycleError):
    """Base for the graduation gate failures."""

    pass


class IncompleteCourseworkError(GraduationBlockedError):
    """Raised when the group curriculum is not fully completed."""

    kind = "incomplete_coursework"


class PaymentIncompleteError(GraduationBlockedError):
    """Raised when the course payment is not PAID."""

    kind = "payment_incomplete"


class NoExamRecordsError(GraduationBlockedError):
    """Raised when no exam has been recorded."""

    kind = "no_exam_records"


class FailingGradeError(GraduationBlockedError):
    """Raised when any recorded exam is a Fail."""

    kind = "failing_grade"


__all__ = [
    "LifecycleError",
    "InvalidRequestError",
    "DuplicateEmailError",
    "DuplicateCourseError",
    "ForbiddenError",
    "NotFoundError",
    "LearnerNotFoundError",
    "TutorNotFoundError",
    "CourseNotFoundError",
    "GroupNotFoundError",
    "EnrollmentNotFoundError",
    "CurriculumItemNotFoundError",
    "ResponseNotFoundError",
    "ExamNotFoundError",
    "TransactionNotFoundError",
    "AlreadyEnrolledError",
    "DuplicateMembershipError",
    "NotGroupMemberError",
    "GroupCourseMismatchError",
    "ItemNotReleasedError",
    "AlreadyGraduatedError",
    "GraduationBlockedError",
    "IncompleteCourseworkError",
    "PaymentIncompleteError",
    "NoExamRecordsError",
    "FailingGradeError",
    "TransactionAbortedError",
]
