# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request and response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import (
    AssignmentStatus,
    CertificationStatus,
    Grade,
    LearnerKind,
    PaymentStatus,
)


class PaymentAttempt(BaseModel):
    """Payment attestation supplied with an enrollment.

    A transaction id is accepted as proof of payment.
    """

    transaction_id: str | None = None
    phone: str | None = None
    amount: Decimal | None = Field(default=None, ge=0)
    time_of_payment: datetime | None = None
    status: PaymentStatus | None = None


class EnrollRequest(BaseModel):
    """Request to enroll a learner in a course."""

    learner_kind: LearnerKind
    payment: PaymentAttempt = Field(default_factory=PaymentAttempt)


class PaymentInfo(BaseModel):
    """Payment state of an enrollment."""

    status: PaymentStatus
    phone: str | None = None
    transaction_id: str | None = None
    amount: Decimal | None = None
    time_of_payment: datetime | None = None


class TutorInfo(BaseModel):
    """Tutor embedded on an enrollment."""

    id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    status: AssignmentStatus


class AssignedGroupInfo(BaseModel):
    """Group placement of an enrollment."""

    group_id: UUID
    group_name: str


class ExamRecord(BaseModel):
    """A recorded exam."""

    id: UUID
    exam_name: str
    grade: Grade
    recorded_at: datetime


class EnrollmentResponse(BaseModel):
    """A learner's per-course state."""

    id: UUID
    learner_id: UUID
    course_id: UUID
    name: str
    duration: int | None = None
    duration_type: str | None = None
    payment: PaymentInfo
    enrolled_at: datetime
    admin_notes: str | None = None
    assignment_status: AssignmentStatus
    tutor: TutorInfo | None = None
    is_assigned_to_group: bool
    assigned_group: AssignedGroupInfo | None = None
    payment_notification_hidden: bool = False
    exams: list[ExamRecord] = Field(default_factory=list)
    gpa: float = 0.0
    final_grade: Grade | None = None
    certification_date: datetime | None = None
    certification_status: CertificationStatus
