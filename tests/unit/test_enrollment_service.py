# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment service."""

from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from zoezi.domains.enrollment import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentService,
    LearnerNotFoundError,
    resolve_payment_status,
)
from zoezi.domains.errors import TransactionAbortedError
from zoezi.infrastructure.database.models import CourseEnrollment, CourseRosterEntry
from zoezi.models.common import (
    AssignmentStatus,
    CertificationStatus,
    LearnerKind,
    PaymentStatus,
    TransactionPurpose,
)
from zoezi.models.enrollment import EnrollRequest, PaymentAttempt


class TestResolvePaymentStatus:
    """Tests for deciding the payment status of a new enrollment."""

    def test_transaction_id_means_paid(self) -> None:
        payment = PaymentAttempt(transaction_id="QX12345", status=PaymentStatus.FAILED)

        assert resolve_payment_status(payment) == PaymentStatus.PAID

    def test_supplied_status_without_transaction(self) -> None:
        assert resolve_payment_status(PaymentAttempt(status=PaymentStatus.PENDING)) == PaymentStatus.PENDING

    def test_nothing_supplied_means_failed(self) -> None:
        assert resolve_payment_status(PaymentAttempt()) == PaymentStatus.FAILED


class TestEnroll:
    """Tests for EnrollmentService.enroll."""

    @pytest.mark.asyncio
    async def test_enroll_paid_student(self, make_learner, make_course, services) -> None:
        learner_id = await make_learner()
        course_id = await make_course()

        enrollment = await services.enrollment.enroll(
            learner_id,
            course_id,
            EnrollRequest(
                learner_kind=LearnerKind.STUDENT,
                payment=PaymentAttempt(transaction_id="QX98765", phone="254700000001", amount=Decimal("15000")),
            ),
        )

        assert enrollment.payment.status == PaymentStatus.PAID
        assert enrollment.payment.transaction_id == "QX98765"
        assert enrollment.assignment_status == AssignmentStatus.PENDING
        assert enrollment.certification_status == CertificationStatus.PENDING
        assert enrollment.is_assigned_to_group is False
        assert enrollment.tutor is None
        assert enrollment.exams == []

        learner = await services.identity.get_learner(learner_id)
        assert learner.course_ids == [course_id]
        roster = await services.courses.list_roster(course_id)
        assert [e.learner_id for e in roster] == [learner_id]

    @pytest.mark.asyncio
    async def test_enroll_marks_ledger_transaction(self, make_learner, make_course, services) -> None:
        learner_id = await make_learner()
        course_id = await make_course()
        await services.payments.record_transaction("QX55555", phone="254700000001", amount=Decimal("15000"))

        await services.enrollment.enroll(
            learner_id,
            course_id,
            EnrollRequest(learner_kind=LearnerKind.STUDENT, payment=PaymentAttempt(transaction_id="QX55555")),
        )

        transaction = await services.payments.get_transaction("QX55555")
        assert transaction.used is True
        assert transaction.purpose == TransactionPurpose.COURSE_PURCHASE
        assert transaction.purpose_meta == {"learner_id": str(learner_id), "course_id": str(course_id)}

    @pytest.mark.asyncio
    async def test_enroll_alumnus(self, make_learner, make_course, enroll) -> None:
        alumnus_id = await make_learner(kind=LearnerKind.ALUMNI)
        course_id = await make_course()

        enrollment = await enroll(alumnus_id, course_id, kind=LearnerKind.ALUMNI, paid=False)

        assert enrollment.payment.status == PaymentStatus.FAILED

    @pytest.mark.asyncio
    async def test_kind_mismatch_is_not_found(self, make_learner, make_course, enroll) -> None:
        student_id = await make_learner()
        course_id = await make_course()

        with pytest.raises(LearnerNotFoundError):
            await enroll(student_id, course_id, kind=LearnerKind.ALUMNI)

    @pytest.mark.asyncio
    async def test_unknown_course(self, make_learner, enroll) -> None:
        learner_id = await make_learner()

        with pytest.raises(CourseNotFoundError):
            await enroll(learner_id, uuid4())

    @pytest.mark.asyncio
    async def test_second_enroll_rejected(self, make_learner, make_course, enroll, session_factory) -> None:
        """Test that enrollment is idempotent per (learner, course)."""
        learner_id = await make_learner()
        course_id = await make_course()
        await enroll(learner_id, course_id)

        with pytest.raises(AlreadyEnrolledError) as exc_info:
            await enroll(learner_id, course_id)

        assert exc_info.value.kind == "already_enrolled"
        async with session_factory() as fresh:
            count = (
                await fresh.execute(
                    select(func.count())
                    .select_from(CourseRosterEntry)
                    .where(CourseRosterEntry.course_id == str(course_id))
                )
            ).scalar_one()
        assert count == 1

    @pytest.mark.asyncio
    async def test_commit_failure_writes_nothing(
        self, make_learner, make_course, services, db_session, session_factory
    ) -> None:
        """Test that a failed commit leaves no enrollment, roster entry or used transaction."""
        learner_id = await make_learner()
        course_id = await make_course()
        await services.payments.record_transaction("QX31313", phone="254700000001", amount=Decimal("15000"))
        service = EnrollmentService(db_session)
        request = EnrollRequest(learner_kind=LearnerKind.STUDENT, payment=PaymentAttempt(transaction_id="QX31313"))

        with patch.object(db_session, "commit", AsyncMock(side_effect=SQLAlchemyError("disk I/O error"))):
            with pytest.raises(TransactionAbortedError):
                await service.enroll(learner_id, course_id, request)

        async with session_factory() as fresh:
            enrollments = (
                await fresh.execute(select(CourseEnrollment).where(CourseEnrollment.learner_id == str(learner_id)))
            ).scalars().all()
            roster = (
                await fresh.execute(select(CourseRosterEntry).where(CourseRosterEntry.course_id == str(course_id)))
            ).scalars().all()
        assert enrollments == []
        assert roster == []
        transaction = await services.payments.get_transaction("QX31313")
        assert transaction.used is False


class TestEnrollNotifications:
    """Tests for the post-commit enrollment notification."""

    @pytest.mark.asyncio
    async def test_notifies_after_commit(self, db_session, make_learner, make_course) -> None:
        learner_id = await make_learner(first_name="Zawadi", last_name="Mwangi")
        course_id = await make_course(name="Personal Training")
        notifier = AsyncMock()
        service = EnrollmentService(db_session, notifier=notifier)

        await service.enroll(
            learner_id,
            course_id,
            EnrollRequest(learner_kind=LearnerKind.STUDENT, payment=PaymentAttempt(status=PaymentStatus.PENDING)),
        )

        notifier.notify.assert_awaited_once()
        template, _, params = notifier.notify.await_args.args
        assert template == "enrollment_confirmed"
        assert params["course_name"] == "Personal Training"
        assert params["payment_status"] == "PENDING"
        assert params["recipient_name"] == "Zawadi Mwangi"

    @pytest.mark.asyncio
    async def test_failed_enroll_does_not_notify(self, db_session, make_learner, make_course, enroll) -> None:
        learner_id = await make_learner()
        course_id = await make_course()
        await enroll(learner_id, course_id)
        notifier = AsyncMock()
        service = EnrollmentService(db_session, notifier=notifier)

        with pytest.raises(AlreadyEnrolledError):
            await service.enroll(learner_id, course_id, EnrollRequest(learner_kind=LearnerKind.STUDENT))

        notifier.notify.assert_not_awaited()
