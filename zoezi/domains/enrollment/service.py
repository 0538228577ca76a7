# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for enrolling learners in courses.

This module provides the EnrollmentService class for:
- Enrolling a student or alumnus in a course
- Listing a learner's enrollments

An enrollment and its course roster entry are written in one unit of work,
together with marking the paying gateway transaction as used.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import AlreadyEnrolledError, LearnerNotFoundError
from zoezi.domains.lookups import load_course, load_learner
from zoezi.domains.payment.service import PaymentService
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import CourseEnrollment, CourseRosterEntry, Exam
from zoezi.infrastructure.notifications.service import NotificationService
from zoezi.models.common import (
    AssignmentStatus,
    CertificationStatus,
    Grade,
    PaymentStatus,
    TransactionPurpose,
)
from zoezi.models.enrollment import (
    AssignedGroupInfo,
    EnrollmentResponse,
    EnrollRequest,
    ExamRecord,
    PaymentAttempt,
    PaymentInfo,
    TutorInfo,
)
from zoezi.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def resolve_payment_status(payment: PaymentAttempt) -> PaymentStatus:
    """Decide the payment status of a new enrollment.

    A transaction id counts as proof of payment. Without one the caller's
    status is used, and a missing status means the payment failed.
    """
    if payment.transaction_id:
        return PaymentStatus.PAID
    return payment.status or PaymentStatus.FAILED


class EnrollmentService:
    """Service for course enrollments.

    Attributes:
        db: Async database session.
        payments: Ledger used to mark paying transactions.
        notifier: Optional best-effort notifier.
    """

    def __init__(self, db: AsyncSession, notifier: NotificationService | None = None) -> None:
        """Initialize enrollment service.

        Args:
            db: Async database session.
            notifier: Notification service called after commit.
        """
        self.db = db
        self.payments = PaymentService(db)
        self.notifier = notifier

    async def enroll(
        self,
        learner_id: UUID,
        course_id: UUID,
        request: EnrollRequest,
    ) -> EnrollmentResponse:
        """Enroll a learner in a course.

        Args:
            learner_id: Learner identifier.
            course_id: Course identifier.
            request: Learner kind and payment attestation.

        Returns:
            The new enrollment.

        Raises:
            LearnerNotFoundError: If no learner of the requested kind exists.
            CourseNotFoundError: If course not found.
            AlreadyEnrolledError: If the learner is already enrolled.
            TransactionAbortedError: If the unit of work could not commit.
        """
        learner = await load_learner(self.db, learner_id)
        if learner.kind != request.learner_kind.value:
            raise LearnerNotFoundError(
                f"{request.learner_kind.value.capitalize()} {learner_id} not found",
                {"learner_id": str(learner_id), "kind": request.learner_kind.value},
            )

        course = await load_course(self.db, course_id)

        if learner.enrollment_for(course.id) is not None or course.roster_entry_for(learner.id) is not None:
            raise AlreadyEnrolledError(
                "Learner is already enrolled in this course",
                {"learner_id": learner.id, "course_id": course.id},
            )

        payment = request.payment
        status = resolve_payment_status(payment)
        now = utc_now()

        enrollment = CourseEnrollment(
            course_id=course.id,
            name=course.name,
            duration=course.duration,
            duration_type=course.duration_type,
            payment_status=status.value,
            payment_phone=payment.phone,
            payment_transaction_id=payment.transaction_id,
            payment_amount=payment.amount,
            time_of_payment=payment.time_of_payment,
            enrolled_at=now,
            assignment_status=AssignmentStatus.PENDING.value,
            certification_status=CertificationStatus.PENDING.value,
            exams=[],
        )
        roster_entry = CourseRosterEntry(
            learner_id=learner.id,
            learner_kind=learner.kind,
            name=learner.full_name,
            email=learner.email,
            phone=learner.phone,
            enrolled_at=now,
            payment_status=status.value,
            payment_phone=payment.phone,
            payment_transaction_id=payment.transaction_id,
            payment_amount=payment.amount,
            time_of_payment=payment.time_of_payment,
            assignment_status=AssignmentStatus.PENDING.value,
        )

        async with atomic(self.db):
            learner.enrollments.append(enrollment)
            course.roster.append(roster_entry)
            if payment.transaction_id:
                await self.payments.mark_used(
                    payment.transaction_id,
                    TransactionPurpose.COURSE_PURCHASE,
                    {"learner_id": learner.id, "course_id": course.id},
                )

        logger.info(
            "Enrolled learner: learner=%s, kind=%s, course=%s, payment=%s",
            learner.id,
            learner.kind,
            course.id,
            status.value,
        )

        if self.notifier is not None:
            await self.notifier.notify(
                "enrollment_confirmed",
                learner.email,
                {
                    "recipient_name": learner.full_name,
                    "course_name": course.name,
                    "payment_status": status.value,
                },
            )

        return enrollment_to_response(enrollment)

    async def get_enrollments(self, learner_id: UUID) -> list[EnrollmentResponse]:
        """List a learner's enrollments in enrollment order.

        Raises:
            LearnerNotFoundError: If learner not found.
        """
        learner = await load_learner(self.db, learner_id)
        return [enrollment_to_response(e) for e in learner.enrollments]


def exam_to_record(exam: Exam) -> ExamRecord:
    return ExamRecord(
        id=exam.id,
        exam_name=exam.exam_name,
        grade=Grade(exam.grade),
        recorded_at=ensure_utc(exam.recorded_at),
    )


def enrollment_to_response(enrollment: CourseEnrollment) -> EnrollmentResponse:
    """Build the response model for an enrollment."""
    tutor = None
    if enrollment.tutor_id:
        tutor = TutorInfo(
            id=enrollment.tutor_id,
            name=enrollment.tutor_name or "",
            email=enrollment.tutor_email,
            phone=enrollment.tutor_phone,
            status=AssignmentStatus(enrollment.tutor_status or enrollment.assignment_status),
        )

    group = None
    if enrollment.assigned_group_id:
        group = AssignedGroupInfo(
            group_id=enrollment.assigned_group_id,
            group_name=enrollment.assigned_group_name or "",
        )

    return EnrollmentResponse(
        id=enrollment.id,
        learner_id=enrollment.learner_id,
        course_id=enrollment.course_id,
        name=enrollment.name,
        duration=enrollment.duration,
        duration_type=enrollment.duration_type,
        payment=PaymentInfo(
            status=PaymentStatus(enrollment.payment_status),
            phone=enrollment.payment_phone,
            transaction_id=enrollment.payment_transaction_id,
            amount=enrollment.payment_amount,
            time_of_payment=ensure_utc(enrollment.time_of_payment),
        ),
        enrolled_at=ensure_utc(enrollment.enrolled_at),
        admin_notes=enrollment.admin_notes,
        assignment_status=AssignmentStatus(enrollment.assignment_status),
        tutor=tutor,
        is_assigned_to_group=enrollment.is_assigned_to_group,
        assigned_group=group,
        payment_notification_hidden=enrollment.payment_notification_hidden,
        exams=[exam_to_record(e) for e in enrollment.exams],
        gpa=enrollment.gpa,
        final_grade=Grade(enrollment.final_grade) if enrollment.final_grade else None,
        certification_date=ensure_utc(enrollment.certification_date),
        certification_status=CertificationStatus(enrollment.certification_status),
    )
