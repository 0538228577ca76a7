# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress and certification roster models."""

from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import CertificationStatus, Grade, LearnerKind, PaymentStatus
from zoezi.models.enrollment import ExamRecord


class CompletionResult(BaseModel):
    """Completion of a group's curriculum."""

    completed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class RosterLearner(BaseModel):
    """One group member with what graduation needs to know."""

    learner_id: UUID
    name: str
    learner_kind: LearnerKind
    completion_percentage: int
    payment_status: PaymentStatus | None = None
    exams: list[ExamRecord] = Field(default_factory=list)
    gpa: float = 0.0
    final_grade: Grade | None = None
    certification_status: CertificationStatus | None = None


class GroupCertificationRoster(BaseModel):
    """Certification view of one group."""

    group_id: UUID
    group_name: str
    course_id: UUID
    course_name: str
    completion: CompletionResult
    learners: list[RosterLearner] = Field(default_factory=list)
