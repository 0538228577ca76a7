# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Certification engine: exam records and graduation.

This module provides the CertificationService class for:
- Recording and removing exams, keeping GPA and final grade current
- Graduating a learner from a course

Graduation checks its gates in a fixed order and stops at the first one
that fails, before anything is written:

1. the group's curriculum is fully completed
2. the course payment is PAID
3. at least one exam is recorded
4. no recorded exam is a Fail

On success a single unit of work marks the enrollment GRADUATED, turns a
student into an alumnus, moves the learner from the tutor's active students
to its certified students, and removes the learner from the group members
and the course roster.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.certification.grading import compute_gpa, final_grade, has_failing_grade
from zoezi.domains.enrollment.service import exam_to_record
from zoezi.domains.errors import (
    AlreadyGraduatedError,
    EnrollmentNotFoundError,
    ExamNotFoundError,
    FailingGradeError,
    GroupCourseMismatchError,
    IncompleteCourseworkError,
    NoExamRecordsError,
    NotGroupMemberError,
    PaymentIncompleteError,
    TutorNotFoundError,
)
from zoezi.domains.lookups import load_course, load_group, load_learner
from zoezi.domains.progress.service import completion_of
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import (
    CertifiedStudent,
    CourseEnrollment,
    CourseRosterEntry,
    Exam,
    Learner,
    TutorStudent,
)
from zoezi.infrastructure.notifications.service import NotificationService
from zoezi.models.certification import AddExamRequest, ExamSummary, GraduationResult
from zoezi.models.common import CertificationStatus, Grade, LearnerKind, PaymentStatus
from zoezi.utils.datetime import format_iso, utc_now

logger = logging.getLogger(__name__)


class CertificationService:
    """Service for exams and graduation.

    Attributes:
        db: Async database session.
        notifier: Optional best-effort notifier.
    """

    def __init__(self, db: AsyncSession, notifier: NotificationService | None = None) -> None:
        """Initialize certification service.

        Args:
            db: Async database session.
            notifier: Notification service called after commit.
        """
        self.db = db
        self.notifier = notifier

    async def add_exam(
        self,
        learner_id: UUID,
        course_id: UUID,
        request: AddExamRequest,
    ) -> ExamSummary:
        """Record an exam and recompute GPA and final grade.

        Raises:
            LearnerNotFoundError: If learner not found.
            EnrollmentNotFoundError: If the learner is not enrolled.
            AlreadyGraduatedError: If the enrollment has graduated.
        """
        learner = await load_learner(self.db, learner_id)
        enrollment = self._get_open_enrollment(learner, str(course_id))

        async with atomic(self.db):
            enrollment.exams.append(
                Exam(exam_name=request.exam_name, grade=request.grade.value, recorded_at=utc_now())
            )
            self._refresh_grades(enrollment)

        logger.info(
            "Exam recorded: learner=%s, course=%s, grade=%s, gpa=%s",
            learner.id,
            course_id,
            request.grade.value,
            enrollment.gpa,
        )
        return self._to_summary(enrollment)

    async def remove_exam(self, learner_id: UUID, course_id: UUID, exam_id: UUID) -> ExamSummary:
        """Remove an exam and recompute GPA and final grade.

        Raises:
            ExamNotFoundError: If the exam is not on the enrollment.
        """
        learner = await load_learner(self.db, learner_id)
        enrollment = self._get_open_enrollment(learner, str(course_id))

        exam = next((e for e in enrollment.exams if e.id == str(exam_id)), None)
        if exam is None:
            raise ExamNotFoundError(f"Exam {exam_id} not found", {"exam_id": str(exam_id)})

        async with atomic(self.db):
            enrollment.exams.remove(exam)
            self._refresh_grades(enrollment)

        logger.info("Exam removed: learner=%s, course=%s, exam=%s", learner.id, course_id, exam_id)
        return self._to_summary(enrollment)

    async def graduate(self, learner_id: UUID, course_id: UUID, group_id: UUID) -> GraduationResult:
        """Graduate a learner from a course.

        Args:
            learner_id: Learner identifier.
            course_id: Course identifier.
            group_id: Group the learner completed the course in.

        Returns:
            The graduation outcome.

        Raises:
            LearnerNotFoundError: If learner not found.
            GroupNotFoundError: If group not found.
            CourseNotFoundError: If course not found.
            EnrollmentNotFoundError: If the learner is not enrolled.
            TutorNotFoundError: If the group's tutor is missing.
            GroupCourseMismatchError: If the group is for another course.
            AlreadyGraduatedError: If the enrollment already graduated.
            NotGroupMemberError: If the learner is not in the group.
            IncompleteCourseworkError: If the curriculum is not complete.
            PaymentIncompleteError: If the payment is not PAID.
            NoExamRecordsError: If no exam is recorded.
            FailingGradeError: If any exam is a Fail.
            TransactionAbortedError: If the unit of work could not commit.
        """
        learner = await load_learner(self.db, learner_id)
        group = await load_group(self.db, group_id)
        course = await load_course(self.db, course_id)
        enrollment = learner.enrollment_for(course.id)
        if enrollment is None:
            raise EnrollmentNotFoundError(
                "Learner is not enrolled in this course",
                {"learner_id": learner.id, "course_id": course.id},
            )

        tutor = group.tutor
        if tutor is None:
            raise TutorNotFoundError(f"Tutor of group {group.id} not found", {"group_id": group.id})

        if group.course_id != course.id:
            raise GroupCourseMismatchError(
                "Group does not belong to this course",
                {"group_id": group.id, "course_id": course.id},
            )
        if enrollment.certification_status == CertificationStatus.GRADUATED.value:
            raise AlreadyGraduatedError(
                "Learner has already graduated from this course",
                {"learner_id": learner.id, "course_id": course.id},
            )
        member = group.member(learner.id)
        if member is None:
            raise NotGroupMemberError(
                "Learner is not a member of this group",
                {"group_id": group.id, "learner_id": learner.id},
            )

        self._check_gates(group.curriculum_items, enrollment)

        previous_kind = learner.kind
        now = utc_now()
        active_entries = await self._tutor_entries(learner.id, course.id)
        own_entry = next((e for e in active_entries if e.tutor_id == tutor.id), None)
        other_rosters, other_entries = await self._kind_mirrors(learner.id, course.id)

        async with atomic(self.db):
            enrollment.certification_status = CertificationStatus.GRADUATED.value
            enrollment.certification_date = now
            enrollment.place_in_group(None, None)

            if learner.kind == LearnerKind.STUDENT.value:
                learner.kind = LearnerKind.ALUMNI.value
                learner.graduation_date = now
                for mirror in (*other_rosters, *other_entries):
                    mirror.learner_kind = LearnerKind.ALUMNI.value

            tutor.certified_students.append(
                CertifiedStudent(
                    learner_id=learner.id,
                    name=learner.full_name,
                    email=learner.email,
                    phone=learner.phone,
                    learner_kind=previous_kind,
                    course_id=course.id,
                    course_name=course.name,
                    payment=self._payment_snapshot(enrollment),
                    settlement=own_entry.settlement_snapshot() if own_entry else None,
                    exams=[
                        {
                            "exam_name": e.exam_name,
                            "grade": e.grade,
                            "recorded_at": format_iso(e.recorded_at),
                        }
                        for e in enrollment.exams
                    ],
                    gpa=enrollment.gpa,
                    final_grade=enrollment.final_grade,
                    certification_date=now,
                )
            )
            for entry in active_entries:
                if entry in tutor.students:
                    tutor.students.remove(entry)
                else:
                    await self.db.delete(entry)

            group.members.remove(member)

            roster_entry = course.roster_entry_for(learner.id)
            if roster_entry is not None:
                course.roster.remove(roster_entry)

        logger.info(
            "Graduated learner: learner=%s, course=%s, group=%s, tutor=%s, kind=%s->%s",
            learner.id,
            course.id,
            group.id,
            tutor.id,
            previous_kind,
            learner.kind,
        )

        if self.notifier is not None:
            await self.notifier.notify(
                "graduated",
                learner.email,
                {
                    "recipient_name": learner.full_name,
                    "course_name": course.name,
                    "gpa": f"{enrollment.gpa:.2f}",
                    "final_grade": enrollment.final_grade or "-",
                    "certification_date": now.date().isoformat(),
                },
            )

        return GraduationResult(
            learner_id=learner.id,
            course_id=course.id,
            certification_date=now,
            learner_kind=LearnerKind(learner.kind),
            gpa=enrollment.gpa,
            final_grade=Grade(enrollment.final_grade) if enrollment.final_grade else None,
        )

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _check_gates(self, items: list, enrollment: CourseEnrollment) -> None:
        """Raise the first failing graduation gate."""
        completion = completion_of(items)
        if completion.percentage < 100:
            raise IncompleteCourseworkError(
                f"Course not 100% complete. {completion.completed}/{completion.total} items completed.",
                {"completed": completion.completed, "total": completion.total},
            )

        if enrollment.payment_status != PaymentStatus.PAID.value:
            raise PaymentIncompleteError(
                f"Payment not complete. Status: {enrollment.payment_status}",
                {"status": enrollment.payment_status},
            )

        grades = [e.grade for e in enrollment.exams]
        if not grades:
            raise NoExamRecordsError("No exam records found for this course")

        if has_failing_grade(grades):
            raise FailingGradeError(
                "Cannot graduate with a failing grade",
                {"grades": grades},
            )

    def _get_open_enrollment(self, learner: Learner, course_id: str) -> CourseEnrollment:
        enrollment = learner.enrollment_for(course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(
                "Learner is not enrolled in this course",
                {"learner_id": learner.id, "course_id": course_id},
            )
        if enrollment.certification_status == CertificationStatus.GRADUATED.value:
            raise AlreadyGraduatedError(
                "Exams of a graduated enrollment are frozen",
                {"learner_id": learner.id, "course_id": course_id},
            )
        return enrollment

    def _refresh_grades(self, enrollment: CourseEnrollment) -> None:
        grades = [e.grade for e in enrollment.exams]
        enrollment.gpa = compute_gpa(grades)
        latest = final_grade(grades)
        enrollment.final_grade = latest.value if latest else None

    def _payment_snapshot(self, enrollment: CourseEnrollment) -> dict[str, Any]:
        return {
            "status": enrollment.payment_status,
            "phone": enrollment.payment_phone,
            "transaction_id": enrollment.payment_transaction_id,
            "amount": str(enrollment.payment_amount) if enrollment.payment_amount is not None else None,
            "time_of_payment": format_iso(enrollment.time_of_payment),
        }

    def _to_summary(self, enrollment: CourseEnrollment) -> ExamSummary:
        return ExamSummary(
            exams=[exam_to_record(e) for e in enrollment.exams],
            gpa=enrollment.gpa,
            final_grade=Grade(enrollment.final_grade) if enrollment.final_grade else None,
        )

    async def _tutor_entries(self, learner_id: str, course_id: str) -> list[TutorStudent]:
        result = await self.db.execute(
            select(TutorStudent).where(
                TutorStudent.learner_id == learner_id,
                TutorStudent.course_id == course_id,
            )
        )
        return list(result.scalars().all())

    async def _kind_mirrors(
        self,
        learner_id: str,
        course_id: str,
    ) -> tuple[list[CourseRosterEntry], list[TutorStudent]]:
        """Roster and tutor entries of the learner's other courses."""
        rosters = await self.db.execute(
            select(CourseRosterEntry).where(
                CourseRosterEntry.learner_id == learner_id,
                CourseRosterEntry.course_id != course_id,
            )
        )
        entries = await self.db.execute(
            select(TutorStudent).where(
                TutorStudent.learner_id == learner_id,
                TutorStudent.course_id != course_id,
            )
        )
        return list(rosters.scalars().all()), list(entries.scalars().all())
