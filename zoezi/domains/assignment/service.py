# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment service for binding learners to tutors and groups.

This module provides the AssignmentService class for:
- Tutor assignment and assignment cancellation
- Adding learners to, removing them from and transferring them between groups

Every operation keeps the learner's enrollment, the course roster entry and
the tutor's student entries in step inside one unit of work.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.enrollment.service import enrollment_to_response
from zoezi.domains.errors import (
    AlreadyGraduatedError,
    DuplicateMembershipError,
    EnrollmentNotFoundError,
    GroupCourseMismatchError,
    NotGroupMemberError,
)
from zoezi.domains.lookups import load_course, load_group, load_learner, load_tutor
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import (
    Course,
    CourseEnrollment,
    CourseRosterEntry,
    Group,
    GroupMember,
    Learner,
    TutorStudent,
)
from zoezi.infrastructure.notifications.service import NotificationService
from zoezi.models.common import AssignmentStatus, CertificationStatus
from zoezi.models.enrollment import EnrollmentResponse
from zoezi.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for tutor and group assignment.

    Attributes:
        db: Async database session.
        notifier: Optional best-effort notifier.
    """

    def __init__(self, db: AsyncSession, notifier: NotificationService | None = None) -> None:
        """Initialize assignment service.

        Args:
            db: Async database session.
            notifier: Notification service called after commit.
        """
        self.db = db
        self.notifier = notifier

    async def assign_tutor(
        self,
        learner_id: UUID,
        course_id: UUID,
        tutor_id: UUID,
    ) -> EnrollmentResponse:
        """Assign a tutor to a learner's course enrollment.

        The enrollment and roster entry become ASSIGNED with the tutor
        embedded, the tutor gains exactly one student entry for the
        (learner, course) pair and active entries on other tutors are
        dropped.

        Args:
            learner_id: Learner identifier.
            course_id: Course identifier.
            tutor_id: Tutor identifier.

        Returns:
            The updated enrollment.

        Raises:
            TutorNotFoundError: If tutor not found.
            CourseNotFoundError: If course not found.
            LearnerNotFoundError: If learner not found.
            EnrollmentNotFoundError: If the enrollment or roster entry is missing.
            AlreadyGraduatedError: If the learner has graduated from the course.
            TransactionAbortedError: If the unit of work could not commit.
        """
        tutor = await load_tutor(self.db, tutor_id)
        course = await load_course(self.db, course_id)
        learner = await load_learner(self.db, learner_id)
        enrollment, roster_entry = self._get_enrollment_pair(learner, course)

        stale_entries = [
            entry
            for entry in await self._tutor_entries(learner.id, course.id)
            if entry.tutor_id != tutor.id
        ]
        now = utc_now()

        async with atomic(self.db):
            for record in (enrollment, roster_entry):
                record.assignment_status = AssignmentStatus.ASSIGNED.value
                record.tutor_id = tutor.id
                record.tutor_name = tutor.full_name
                record.tutor_email = tutor.email
                record.tutor_phone = tutor.phone
                record.tutor_status = AssignmentStatus.ASSIGNED.value
            roster_entry.learner_kind = learner.kind

            entry = tutor.student_entry(learner.id, course.id)
            if entry is None:
                entry = TutorStudent(
                    learner_id=learner.id,
                    course_id=course.id,
                    assigned_at=now,
                )
                tutor.students.append(entry)
            entry.name = learner.full_name
            entry.course_name = course.name
            entry.payment_status = enrollment.payment_status
            entry.learner_kind = learner.kind
            entry.place_in_group(enrollment.assigned_group_id, enrollment.assigned_group_name)

            for stale in stale_entries:
                await self.db.delete(stale)

        logger.info(
            "Assigned tutor: learner=%s, course=%s, tutor=%s, replaced=%s",
            learner.id,
            course.id,
            tutor.id,
            len(stale_entries),
        )

        if self.notifier is not None:
            await self.notifier.notify(
                "tutor_assigned",
                learner.email,
                {
                    "recipient_name": learner.full_name,
                    "course_name": course.name,
                    "tutor_name": tutor.full_name,
                },
            )

        return enrollment_to_response(enrollment)

    async def cancel_assignment(
        self,
        learner_id: UUID,
        course_id: UUID,
        reason: str,
    ) -> EnrollmentResponse:
        """Cancel a learner's assignment for a course.

        The tutor's student entry is kept for audit.

        Raises:
            CourseNotFoundError: If course not found.
            LearnerNotFoundError: If learner not found.
            EnrollmentNotFoundError: If the enrollment or roster entry is missing.
            AlreadyGraduatedError: If the learner has graduated from the course.
        """
        course = await load_course(self.db, course_id)
        learner = await load_learner(self.db, learner_id)
        enrollment, roster_entry = self._get_enrollment_pair(learner, course)

        async with atomic(self.db):
            for record in (enrollment, roster_entry):
                record.assignment_status = AssignmentStatus.CANCELLED.value
                record.tutor_status = AssignmentStatus.CANCELLED.value
                record.admin_notes = reason

        logger.info("Cancelled assignment: learner=%s, course=%s", learner.id, course.id)
        return enrollment_to_response(enrollment)

    async def add_to_group(self, group_id: UUID, learner_id: UUID) -> EnrollmentResponse:
        """Place a learner in a group.

        Raises:
            GroupNotFoundError: If group not found.
            LearnerNotFoundError: If learner not found.
            EnrollmentNotFoundError: If the learner is not enrolled in the
                group's course.
            DuplicateMembershipError: If the learner is already in this group
                or in another group for the same course.
            AlreadyGraduatedError: If the learner has graduated from the course.
        """
        group = await load_group(self.db, group_id)
        learner = await load_learner(self.db, learner_id)
        enrollment = self._get_enrollment(learner, group.course_id)
        self._ensure_not_graduated(enrollment)

        if group.member(learner.id) is not None:
            raise DuplicateMembershipError(
                "Learner is already a member of this group",
                {"group_id": group.id, "learner_id": learner.id},
            )
        if enrollment.assigned_group_id and enrollment.assigned_group_id != group.id:
            raise DuplicateMembershipError(
                "Learner is already placed in another group for this course; transfer instead",
                {"group_id": enrollment.assigned_group_id, "learner_id": learner.id},
            )

        async with atomic(self.db):
            group.members.append(GroupMember(learner_id=learner.id, name=learner.full_name))
            enrollment.place_in_group(group.id, group.name)
            entry = group.tutor.student_entry(learner.id, group.course_id)
            if entry is not None:
                entry.place_in_group(group.id, group.name)

        logger.info("Added to group: group=%s, learner=%s", group.id, learner.id)
        return enrollment_to_response(enrollment)

    async def remove_from_group(self, group_id: UUID, learner_id: UUID) -> EnrollmentResponse | None:
        """Take a learner out of a group.

        Returns:
            The updated enrollment, or None if the learner no longer holds one.

        Raises:
            GroupNotFoundError: If group not found.
            NotGroupMemberError: If the learner is not listed in the group.
        """
        group = await load_group(self.db, group_id)
        member = self._get_member(group, learner_id)
        learner = await load_learner(self.db, learner_id)
        enrollment = learner.enrollment_for(group.course_id)
        entries = [
            e for e in await self._tutor_entries(learner.id, group.course_id)
            if e.assigned_group_id == group.id
        ]

        async with atomic(self.db):
            group.members.remove(member)
            if enrollment is not None and enrollment.assigned_group_id == group.id:
                enrollment.place_in_group(None, None)
            for entry in entries:
                entry.place_in_group(None, None)

        logger.info("Removed from group: group=%s, learner=%s", group.id, learner.id)
        return enrollment_to_response(enrollment) if enrollment is not None else None

    async def transfer_group(
        self,
        from_group_id: UUID,
        to_group_id: UUID,
        learner_id: UUID,
    ) -> EnrollmentResponse:
        """Move a learner between two groups of the same course.

        Raises:
            GroupNotFoundError: If either group is not found.
            GroupCourseMismatchError: If the groups belong to different courses.
            NotGroupMemberError: If the learner is not in the source group.
            EnrollmentNotFoundError: If the learner is not enrolled in the course.
        """
        source = await load_group(self.db, from_group_id)
        target = await load_group(self.db, to_group_id)
        if source.course_id != target.course_id:
            raise GroupCourseMismatchError(
                "Groups belong to different courses",
                {"from_group_id": source.id, "to_group_id": target.id},
            )

        member = self._get_member(source, learner_id)
        learner = await load_learner(self.db, learner_id)
        enrollment = self._get_enrollment(learner, source.course_id)

        if source.id == target.id:
            return enrollment_to_response(enrollment)

        entries = await self._tutor_entries(learner.id, source.course_id)

        async with atomic(self.db):
            source.members.remove(member)
            if target.member(learner.id) is None:
                target.members.append(GroupMember(learner_id=learner.id, name=member.name))
            enrollment.place_in_group(target.id, target.name)
            for entry in entries:
                entry.place_in_group(target.id, target.name)

        logger.info(
            "Transferred group: learner=%s, from=%s, to=%s",
            learner.id,
            source.id,
            target.id,
        )
        return enrollment_to_response(enrollment)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _get_enrollment(self, learner: Learner, course_id: str) -> CourseEnrollment:
        enrollment = learner.enrollment_for(course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(
                "Learner is not enrolled in this course",
                {"learner_id": learner.id, "course_id": course_id},
            )
        return enrollment

    def _get_enrollment_pair(
        self,
        learner: Learner,
        course: Course,
    ) -> tuple[CourseEnrollment, CourseRosterEntry]:
        enrollment = self._get_enrollment(learner, course.id)
        self._ensure_not_graduated(enrollment)
        roster_entry = course.roster_entry_for(learner.id)
        if roster_entry is None:
            raise EnrollmentNotFoundError(
                "Learner is missing from the course roster",
                {"learner_id": learner.id, "course_id": course.id},
            )
        return enrollment, roster_entry

    def _ensure_not_graduated(self, enrollment: CourseEnrollment) -> None:
        if enrollment.certification_status == CertificationStatus.GRADUATED.value:
            raise AlreadyGraduatedError(
                "Learner has already graduated from this course",
                {"learner_id": enrollment.learner_id, "course_id": enrollment.course_id},
            )

    def _get_member(self, group: Group, learner_id: UUID) -> GroupMember:
        member = group.member(str(learner_id))
        if member is None:
            raise NotGroupMemberError(
                "Learner is not a member of this group",
                {"group_id": group.id, "learner_id": str(learner_id)},
            )
        return member

    async def _tutor_entries(self, learner_id: str, course_id: str) -> list[TutorStudent]:
        result = await self.db.execute(
            select(TutorStudent).where(
                TutorStudent.learner_id == learner_id,
                TutorStudent.course_id == course_id,
            )
        )
        return list(result.scalars().all())
