# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog service.

This module provides the CourseCatalogService class for:
- Course creation and lookup
- Linking tutors to courses
- Reading a course's enrolled-learner roster
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import DuplicateCourseError
from zoezi.domains.lookups import load_course, load_tutor
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import Course, CourseRosterEntry
from zoezi.models.common import AssignmentStatus, DurationType, LearnerKind, PaymentStatus
from zoezi.models.course import CourseResponse, CreateCourseRequest, RosterEntryResponse
from zoezi.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class CourseCatalogService:
    """Service for the course catalog.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_course(self, request: CreateCourseRequest) -> CourseResponse:
        """Add a course to the catalog.

        Args:
            request: Course data.

        Returns:
            The created course.

        Raises:
            DuplicateCourseError: If the name is already taken.
        """
        result = await self.db.execute(
            select(func.count()).select_from(Course).where(Course.name == request.name)
        )
        if result.scalar_one() > 0:
            raise DuplicateCourseError(f"Course '{request.name}' already exists", {"name": request.name})

        course = Course(
            name=request.name,
            description=request.description,
            course_type=request.course_type,
            course_tier=request.course_tier,
            duration=request.duration,
            duration_type=request.duration_type.value if request.duration_type else None,
            course_fee=request.course_fee,
            offer_price=request.offer_price,
            tutors=[],
            roster=[],
        )

        async with atomic(self.db):
            self.db.add(course)

        logger.info("Created course: id=%s, name=%s", course.id, course.name)
        return self._to_response(course)

    async def get_course(self, course_id: UUID) -> CourseResponse:
        """Get a course.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await load_course(self.db, course_id)
        return self._to_response(course)

    async def assign_tutors(self, course_id: UUID, tutor_ids: list[UUID]) -> CourseResponse:
        """Link tutors to a course. Already linked tutors are left as they are.

        Raises:
            CourseNotFoundError: If course not found.
            TutorNotFoundError: If any tutor is not found.
        """
        course = await load_course(self.db, course_id)
        tutors = [await load_tutor(self.db, tutor_id) for tutor_id in tutor_ids]

        linked = {t.id for t in course.tutors}
        async with atomic(self.db):
            for tutor in tutors:
                if tutor.id not in linked:
                    course.tutors.append(tutor)
                    linked.add(tutor.id)

        logger.info("Assigned tutors to course: course=%s, tutors=%s", course_id, len(tutor_ids))
        return self._to_response(course)

    async def list_roster(self, course_id: UUID) -> list[RosterEntryResponse]:
        """List a course's roster in enrollment order.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await load_course(self.db, course_id)
        entries = sorted(course.roster, key=lambda e: ensure_utc(e.enrolled_at))
        return [self._to_roster_response(e) for e in entries]

    def _to_response(self, course: Course) -> CourseResponse:
        return CourseResponse(
            id=course.id,
            name=course.name,
            description=course.description,
            course_type=course.course_type,
            course_tier=course.course_tier,
            duration=course.duration,
            duration_type=DurationType(course.duration_type) if course.duration_type else None,
            course_fee=course.course_fee,
            offer_price=course.offer_price,
            status=course.status,
            is_archived=course.is_archived,
            tutor_ids=[t.id for t in course.tutors],
            roster_size=len(course.roster),
        )

    def _to_roster_response(self, entry: CourseRosterEntry) -> RosterEntryResponse:
        return RosterEntryResponse(
            learner_id=entry.learner_id,
            learner_kind=LearnerKind(entry.learner_kind),
            name=entry.name,
            email=entry.email,
            phone=entry.phone,
            enrolled_at=ensure_utc(entry.enrolled_at),
            payment_status=PaymentStatus(entry.payment_status),
            assignment_status=AssignmentStatus(entry.assignment_status),
            admin_notes=entry.admin_notes,
            tutor_id=entry.tutor_id,
            tutor_name=entry.tutor_name,
            tutor_status=AssignmentStatus(entry.tutor_status) if entry.tutor_status else None,
        )
