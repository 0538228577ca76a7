# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity service for learner and tutor records.

This module provides the IdentityService class for:
- Learner (student and alumni) and tutor registration
- Learner lookup regardless of lifecycle kind
- Public profile and payment-notification flags
- CPD exam records
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import (
    DuplicateEmailError,
    EnrollmentNotFoundError,
    LearnerNotFoundError,
)
from zoezi.domains.identity.admission import next_admission_number
from zoezi.domains.lookups import load_learner, load_tutor
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import CPDRecord, Learner, Tutor
from zoezi.models.common import CPDResult, LearnerKind
from zoezi.models.learner import (
    CPDRecordRequest,
    CPDRecordResponse,
    LearnerResponse,
    ProfilePicture,
    RegisterLearnerRequest,
    RegisterTutorRequest,
    SubscriptionState,
    TutorResponse,
)
from zoezi.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class IdentityService:
    """Service for learner and tutor identity records.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize identity service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def register_learner(
        self,
        request: RegisterLearnerRequest,
        kind: LearnerKind = LearnerKind.STUDENT,
    ) -> LearnerResponse:
        """Register a learner.

        Students receive the next admission number for the current month.

        Args:
            request: Registration data.
            kind: Lifecycle kind of the new record.

        Returns:
            The registered learner.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        email = request.email.lower()
        await self._ensure_email_free(Learner, email)

        next_of_kin = request.next_of_kin
        picture = request.profile_picture
        learner = Learner(
            kind=kind.value,
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            phone=request.phone,
            id_number=request.id_number,
            date_of_birth=request.date_of_birth,
            password_hash=request.password_hash,
            current_location=request.current_location,
            next_of_kin_name=next_of_kin.name if next_of_kin else None,
            next_of_kin_relationship=next_of_kin.relationship if next_of_kin else None,
            next_of_kin_phone=next_of_kin.phone if next_of_kin else None,
            profile_picture_url=picture.url if picture else None,
            profile_picture_storage_id=picture.storage_id if picture else None,
            enrollments=[],
            cpd_records=[],
            subscription_payments=[],
        )

        async with atomic(self.db):
            if kind == LearnerKind.STUDENT:
                learner.admission_number = await next_admission_number(self.db)
            self.db.add(learner)

        logger.info(
            "Registered learner: id=%s, kind=%s, admission=%s",
            learner.id,
            learner.kind,
            learner.admission_number,
        )

        return self._to_learner_response(learner)

    async def register_tutor(self, request: RegisterTutorRequest) -> TutorResponse:
        """Register a tutor.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        email = request.email.lower()
        await self._ensure_email_free(Tutor, email)

        tutor = Tutor(
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            phone=request.phone,
            role=request.role,
            kra_pin=request.kra_pin,
            courses=[],
            students=[],
            certified_students=[],
        )

        async with atomic(self.db):
            self.db.add(tutor)

        logger.info("Registered tutor: id=%s", tutor.id)

        return self._to_tutor_response(tutor)

    async def find_learner_any_kind(
        self,
        learner_id: UUID,
    ) -> tuple[LearnerKind, LearnerResponse] | None:
        """Look a learner up without knowing its kind.

        Returns:
            Tuple of (kind, learner) or None if no such learner exists.
        """
        try:
            learner = await load_learner(self.db, learner_id)
        except LearnerNotFoundError:
            return None
        return LearnerKind(learner.kind), self._to_learner_response(learner)

    async def get_learner(
        self,
        learner_id: UUID,
        kind: LearnerKind | None = None,
    ) -> LearnerResponse:
        """Get a learner, optionally of a required kind.

        Raises:
            LearnerNotFoundError: If missing or of a different kind.
        """
        learner = await load_learner(self.db, learner_id)
        if kind is not None and learner.kind != kind.value:
            raise LearnerNotFoundError(
                f"{kind.value.capitalize()} {learner_id} not found",
                {"learner_id": str(learner_id), "kind": kind.value},
            )
        return self._to_learner_response(learner)

    async def get_tutor(self, tutor_id: UUID) -> TutorResponse:
        """Get a tutor.

        Raises:
            TutorNotFoundError: If tutor not found.
        """
        tutor = await load_tutor(self.db, tutor_id)
        return self._to_tutor_response(tutor)

    async def set_public_profile(self, learner_id: UUID, enabled: bool) -> LearnerResponse:
        """Toggle whether the learner's profile is publicly visible."""
        learner = await load_learner(self.db, learner_id)

        async with atomic(self.db):
            learner.is_public_profile_enabled = enabled

        logger.info("Public profile %s: learner=%s", "enabled" if enabled else "disabled", learner_id)
        return self._to_learner_response(learner)

    async def record_cpd(self, learner_id: UUID, request: CPDRecordRequest) -> CPDRecordResponse:
        """Record a CPD exam result for a learner.

        Raises:
            LearnerNotFoundError: If learner not found.
        """
        learner = await load_learner(self.db, learner_id)

        record = CPDRecord(
            year=request.year,
            date_taken=request.date_taken,
            result=request.result.value,
            score=request.score,
            remarks=request.remarks,
        )

        async with atomic(self.db):
            learner.cpd_records.append(record)

        logger.info("Recorded CPD: learner=%s, year=%s, result=%s", learner_id, request.year, request.result)
        return self._to_cpd_response(record)

    async def list_cpd(self, learner_id: UUID) -> list[CPDRecordResponse]:
        """List a learner's CPD records, newest year first."""
        learner = await load_learner(self.db, learner_id)
        records = sorted(learner.cpd_records, key=lambda r: r.year, reverse=True)
        return [self._to_cpd_response(r) for r in records]

    async def hide_payment_notification(self, learner_id: UUID, course_id: UUID) -> None:
        """Stop showing the payment reminder for one enrollment.

        Raises:
            LearnerNotFoundError: If learner not found.
            EnrollmentNotFoundError: If the learner is not enrolled.
        """
        learner = await load_learner(self.db, learner_id)
        enrollment = learner.enrollment_for(str(course_id))
        if enrollment is None:
            raise EnrollmentNotFoundError(
                "Learner is not enrolled in this course",
                {"learner_id": str(learner_id), "course_id": str(course_id)},
            )

        async with atomic(self.db):
            enrollment.payment_notification_hidden = True

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _ensure_email_free(self, model: type[Learner] | type[Tutor], email: str) -> None:
        result = await self.db.execute(
            select(func.count()).select_from(model).where(model.email == email)
        )
        if result.scalar_one() > 0:
            raise DuplicateEmailError(f"Email {email} is already registered", {"email": email})

    def _to_learner_response(self, learner: Learner) -> LearnerResponse:
        picture = None
        if learner.profile_picture_url:
            picture = ProfilePicture(
                url=learner.profile_picture_url,
                storage_id=learner.profile_picture_storage_id,
            )
        return LearnerResponse(
            id=learner.id,
            kind=LearnerKind(learner.kind),
            first_name=learner.first_name,
            last_name=learner.last_name,
            email=learner.email,
            phone=learner.phone,
            admission_number=learner.admission_number,
            current_location=learner.current_location,
            profile_picture=picture,
            is_public_profile_enabled=learner.is_public_profile_enabled,
            graduation_date=ensure_utc(learner.graduation_date),
            subscription=subscription_state(learner),
            course_ids=[e.course_id for e in learner.enrollments],
        )

    def _to_tutor_response(self, tutor: Tutor) -> TutorResponse:
        return TutorResponse(
            id=tutor.id,
            first_name=tutor.first_name,
            last_name=tutor.last_name,
            email=tutor.email,
            phone=tutor.phone,
            role=tutor.role,
            is_active=tutor.is_active,
            course_ids=[c.id for c in tutor.courses],
            active_students=len(tutor.students),
            certified_students=len(tutor.certified_students),
        )

    def _to_cpd_response(self, record: CPDRecord) -> CPDRecordResponse:
        return CPDRecordResponse(
            id=record.id,
            year=record.year,
            date_taken=record.date_taken,
            result=CPDResult(record.result),
            score=record.score,
            remarks=record.remarks,
            created_at=ensure_utc(record.created_at),
        )


def subscription_state(learner: Learner) -> SubscriptionState:
    """Subscription fields of a learner as a response model."""
    return SubscriptionState(
        active=learner.subscription_active,
        expiry_date=ensure_utc(learner.subscription_expiry_date),
        years_subscribed=learner.years_subscribed,
        last_payment_date=ensure_utc(learner.last_payment_date),
        auto_renew=learner.auto_renew,
    )
