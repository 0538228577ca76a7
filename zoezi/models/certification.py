# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exam and graduation models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import Grade, LearnerKind
from zoezi.models.enrollment import ExamRecord


class AddExamRequest(BaseModel):
    """Request to record an exam result."""

    exam_name: str = Field(..., min_length=1, max_length=200)
    grade: Grade


class ExamSummary(BaseModel):
    """Exams of an enrollment with derived GPA and final grade."""

    exams: list[ExamRecord] = Field(default_factory=list)
    gpa: float = 0.0
    final_grade: Grade | None = None


class GraduationResult(BaseModel):
    """Outcome of a successful graduation."""

    learner_id: UUID
    course_id: UUID
    certification_date: datetime
    learner_kind: LearnerKind
    gpa: float
    final_grade: Grade | None = None
