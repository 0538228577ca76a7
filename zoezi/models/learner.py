# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity request and response models for learners and tutors."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from zoezi.models.common import CPDResult, LearnerKind


class ProfilePicture(BaseModel):
    """Object-storage reference for a profile picture."""

    url: str
    storage_id: str | None = None


class NextOfKin(BaseModel):
    """Emergency contact."""

    name: str
    relationship: str | None = None
    phone: str | None = None


class RegisterLearnerRequest(BaseModel):
    """Request to register a student or alumnus."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = None
    id_number: str | None = None
    date_of_birth: date | None = None
    password_hash: str | None = None
    current_location: str | None = None
    next_of_kin: NextOfKin | None = None
    profile_picture: ProfilePicture | None = None


class SubscriptionState(BaseModel):
    """Alumni subscription state."""

    active: bool = False
    expiry_date: datetime | None = None
    years_subscribed: int = 0
    last_payment_date: datetime | None = None
    auto_renew: bool = False


class LearnerResponse(BaseModel):
    """Learner profile."""

    id: UUID
    kind: LearnerKind
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    admission_number: str | None = None
    current_location: str | None = None
    profile_picture: ProfilePicture | None = None
    is_public_profile_enabled: bool = False
    graduation_date: datetime | None = None
    subscription: SubscriptionState
    course_ids: list[UUID] = Field(default_factory=list)


class RegisterTutorRequest(BaseModel):
    """Request to register a tutor."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = None
    role: str = "tutor"
    kra_pin: str | None = None


class TutorResponse(BaseModel):
    """Tutor profile with its active and certified learner counts."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    role: str
    is_active: bool
    course_ids: list[UUID] = Field(default_factory=list)
    active_students: int = 0
    certified_students: int = 0


class CPDRecordRequest(BaseModel):
    """Request to record a CPD exam result."""

    year: int = Field(..., ge=1900, le=2100)
    date_taken: date
    result: CPDResult
    score: float | None = Field(default=None, ge=0, le=100)
    remarks: str | None = None


class CPDRecordResponse(BaseModel):
    """A CPD exam record."""

    id: UUID
    year: int
    date_taken: date
    result: CPDResult
    score: float | None = None
    remarks: str | None = None
    created_at: datetime
