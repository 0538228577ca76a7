# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the course catalog service."""

from decimal import Decimal
from uuid import uuid4

import pytest

from zoezi.domains.course import CourseNotFoundError, DuplicateCourseError, TutorNotFoundError
from zoezi.models.common import AssignmentStatus, DurationType, LearnerKind, PaymentStatus
from zoezi.models.course import CreateCourseRequest


class TestCreateCourse:
    """Tests for course creation."""

    @pytest.mark.asyncio
    async def test_create_course(self, services) -> None:
        course = await services.courses.create_course(
            CreateCourseRequest(
                name="Fitness Instruction",
                duration=6,
                duration_type=DurationType.MONTHS,
                course_fee=Decimal("45000.00"),
            )
        )

        assert course.name == "Fitness Instruction"
        assert course.duration_type == DurationType.MONTHS
        assert course.course_fee == Decimal("45000.00")
        assert course.tutor_ids == []
        assert course.roster_size == 0

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, make_course) -> None:
        await make_course(name="Yoga Teacher Training")

        with pytest.raises(DuplicateCourseError):
            await make_course(name="Yoga Teacher Training")

    @pytest.mark.asyncio
    async def test_unknown_course(self, services) -> None:
        with pytest.raises(CourseNotFoundError):
            await services.courses.get_course(uuid4())


class TestAssignTutors:
    """Tests for linking tutors to courses."""

    @pytest.mark.asyncio
    async def test_assign_is_idempotent(self, make_course, make_tutor, services) -> None:
        course_id = await make_course()
        first = await make_tutor()
        second = await make_tutor()

        await services.courses.assign_tutors(course_id, [first])
        course = await services.courses.assign_tutors(course_id, [first, second])

        assert sorted(course.tutor_ids) == sorted([first, second])
        tutor = await services.identity.get_tutor(first)
        assert tutor.course_ids == [course_id]

    @pytest.mark.asyncio
    async def test_unknown_tutor(self, make_course, services) -> None:
        course_id = await make_course()

        with pytest.raises(TutorNotFoundError):
            await services.courses.assign_tutors(course_id, [uuid4()])


class TestRoster:
    """Tests for the course roster."""

    @pytest.mark.asyncio
    async def test_roster_lists_enrolled_learners(self, make_course, make_learner, enroll, services) -> None:
        course_id = await make_course()
        student_id = await make_learner(first_name="Amina")
        alumnus_id = await make_learner(kind=LearnerKind.ALUMNI, first_name="Baraka")
        await enroll(student_id, course_id)
        await enroll(alumnus_id, course_id, kind=LearnerKind.ALUMNI, paid=False)

        roster = await services.courses.list_roster(course_id)

        assert [e.learner_id for e in roster] == [student_id, alumnus_id]
        assert roster[0].learner_kind == LearnerKind.STUDENT
        assert roster[0].payment_status == PaymentStatus.PAID
        assert roster[1].learner_kind == LearnerKind.ALUMNI
        assert roster[1].payment_status == PaymentStatus.FAILED
        assert all(e.assignment_status == AssignmentStatus.PENDING for e in roster)
