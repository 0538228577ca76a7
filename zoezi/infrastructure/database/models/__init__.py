# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the Zoezi lifecycle core.

Importing this package registers every table on Base.metadata.
"""

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, new_id
from zoezi.infrastructure.database.models.course import Course, CourseRosterEntry, course_tutors
from zoezi.infrastructure.database.models.group import (
    CurriculumItem,
    Group,
    GroupMember,
    ItemResponse,
)
from zoezi.infrastructure.database.models.learner import (
    CourseEnrollment,
    CPDRecord,
    Exam,
    Learner,
    SubscriptionPayment,
)
from zoezi.infrastructure.database.models.payment import PaymentTransaction
from zoezi.infrastructure.database.models.sequence import SequenceCounter
from zoezi.infrastructure.database.models.tutor import CertifiedStudent, Tutor, TutorStudent

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    # Learners
    "Learner",
    "CourseEnrollment",
    "Exam",
    "CPDRecord",
    "SubscriptionPayment",
    # Catalog
    "Course",
    "CourseRosterEntry",
    "course_tutors",
    # Tutors
    "Tutor",
    "TutorStudent",
    "CertifiedStudent",
    # Groups
    "Group",
    "GroupMember",
    "CurriculumItem",
    "ItemResponse",
    # Ledger
    "PaymentTransaction",
    "SequenceCounter",
]
