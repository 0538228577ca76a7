# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog request and response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import AssignmentStatus, DurationType, LearnerKind, PaymentStatus


class CreateCourseRequest(BaseModel):
    """Request to add a course to the catalog."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    course_type: str | None = None
    course_tier: str | None = None
    duration: int | None = Field(default=None, ge=1)
    duration_type: DurationType | None = None
    course_fee: Decimal | None = Field(default=None, ge=0)
    offer_price: Decimal | None = Field(default=None, ge=0)


class CourseResponse(BaseModel):
    """Course details."""

    id: UUID
    name: str
    description: str | None = None
    course_type: str | None = None
    course_tier: str | None = None
    duration: int | None = None
    duration_type: DurationType | None = None
    course_fee: Decimal | None = None
    offer_price: Decimal | None = None
    status: str
    is_archived: bool
    tutor_ids: list[UUID] = Field(default_factory=list)
    roster_size: int = 0


class RosterEntryResponse(BaseModel):
    """One learner on a course roster."""

    learner_id: UUID
    learner_kind: LearnerKind
    name: str
    email: str
    phone: str | None = None
    enrolled_at: datetime
    payment_status: PaymentStatus
    assignment_status: AssignmentStatus
    admin_notes: str | None = None
    tutor_id: UUID | None = None
    tutor_name: str | None = None
    tutor_status: AssignmentStatus | None = None
