# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the assignment service."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from zoezi.domains.assignment import (
    AssignmentService,
    DuplicateMembershipError,
    EnrollmentNotFoundError,
    GroupCourseMismatchError,
    NotGroupMemberError,
)
from zoezi.domains.errors import TransactionAbortedError
from zoezi.infrastructure.database.models import (
    CourseEnrollment,
    CourseRosterEntry,
    GroupMember,
    TutorStudent,
)
from zoezi.models.common import AssignmentStatus


async def _tutor_entries(session, learner_id) -> list[TutorStudent]:
    result = await session.execute(select(TutorStudent).where(TutorStudent.learner_id == str(learner_id)))
    return list(result.scalars().all())


class TestAssignTutor:
    """Tests for tutor assignment."""

    @pytest.mark.asyncio
    async def test_assign_updates_all_three_records(
        self, make_learner, make_course, make_tutor, enroll, services, session_factory
    ) -> None:
        """Test that enrollment, roster entry and tutor entry agree."""
        learner_id = await make_learner()
        course_id = await make_course()
        tutor_id = await make_tutor(first_name="Njeri", last_name="Wambui")
        await enroll(learner_id, course_id)

        enrollment = await services.assignment.assign_tutor(learner_id, course_id, tutor_id)

        assert enrollment.assignment_status == AssignmentStatus.ASSIGNED
        assert enrollment.tutor.id == tutor_id
        assert enrollment.tutor.name == "Njeri Wambui"

        roster = await services.courses.list_roster(course_id)
        assert roster[0].assignment_status == AssignmentStatus.ASSIGNED
        assert roster[0].tutor_id == tutor_id

        async with session_factory() as fresh:
            entries = await _tutor_entries(fresh, learner_id)
        assert [(e.tutor_id, e.course_id) for e in entries] == [(str(tutor_id), str(course_id))]
        assert entries[0].payment_status == "PAID"

    @pytest.mark.asyncio
    async def test_reassign_moves_entry(
        self, make_learner, make_course, make_tutor, enroll, services, session_factory
    ) -> None:
        learner_id = await make_learner()
        course_id = await make_course()
        first_tutor = await make_tutor()
        second_tutor = await make_tutor()
        await enroll(learner_id, course_id)

        await services.assignment.assign_tutor(learner_id, course_id, first_tutor)
        await services.assignment.assign_tutor(learner_id, course_id, second_tutor)
        await services.assignment.assign_tutor(learner_id, course_id, second_tutor)

        async with session_factory() as fresh:
            entries = await _tutor_entries(fresh, learner_id)
        assert [e.tutor_id for e in entries] == [str(second_tutor)]
        first = await services.identity.get_tutor(first_tutor)
        assert first.active_students == 0

    @pytest.mark.asyncio
    async def test_not_enrolled(self, make_learner, make_course, make_tutor, services) -> None:
        learner_id = await make_learner()
        course_id = await make_course()
        tutor_id = await make_tutor()

        with pytest.raises(EnrollmentNotFoundError):
            await services.assignment.assign_tutor(learner_id, course_id, tutor_id)

    @pytest.mark.asyncio
    async def test_commit_failure_leaves_records_untouched(
        self, make_learner, make_course, make_tutor, enroll, db_session, session_factory
    ) -> None:
        """Test that a failed unit of work changes none of the three records."""
        learner_id = await make_learner()
        course_id = await make_course()
        tutor_id = await make_tutor()
        await enroll(learner_id, course_id)
        service = AssignmentService(db_session)

        with patch.object(db_session, "commit", AsyncMock(side_effect=SQLAlchemyError("disk I/O error"))):
            with pytest.raises(TransactionAbortedError) as exc_info:
                await service.assign_tutor(learner_id, course_id, tutor_id)

        assert exc_info.value.kind == "transaction_aborted"
        async with session_factory() as fresh:
            enrollment = (
                await fresh.execute(
                    select(CourseEnrollment).where(CourseEnrollment.learner_id == str(learner_id))
                )
            ).scalar_one()
            roster_entry = (
                await fresh.execute(
                    select(CourseRosterEntry).where(CourseRosterEntry.learner_id == str(learner_id))
                )
            ).scalar_one()
            entries = await _tutor_entries(fresh, learner_id)

        assert enrollment.assignment_status == AssignmentStatus.PENDING.value
        assert enrollment.tutor_id is None
        assert roster_entry.assignment_status == AssignmentStatus.PENDING.value
        assert entries == []

    @pytest.mark.asyncio
    async def test_cancel_assignment(self, placed_learner, services) -> None:
        ids = await placed_learner()

        enrollment = await services.assignment.cancel_assignment(
            ids["learner_id"], ids["course_id"], "Learner deferred"
        )

        assert enrollment.assignment_status == AssignmentStatus.CANCELLED
        assert enrollment.admin_notes == "Learner deferred"
        roster = await services.courses.list_roster(ids["course_id"])
        assert roster[0].assignment_status == AssignmentStatus.CANCELLED
        assert roster[0].admin_notes == "Learner deferred"


class TestGroupMembership:
    """Tests for adding to and removing from groups."""

    @pytest.mark.asyncio
    async def test_add_to_group_places_learner(self, placed_learner, services, session_factory) -> None:
        ids = await placed_learner()

        group = await services.groups.get_group(ids["group_id"])
        enrollments = await services.enrollment.get_enrollments(ids["learner_id"])

        assert [m.learner_id for m in group.members] == [ids["learner_id"]]
        assert enrollments[0].is_assigned_to_group is True
        assert enrollments[0].assigned_group.group_id == ids["group_id"]
        async with session_factory() as fresh:
            entries = await _tutor_entries(fresh, ids["learner_id"])
        assert entries[0].assigned_group_id == str(ids["group_id"])

    @pytest.mark.asyncio
    async def test_add_twice_rejected(self, placed_learner, services) -> None:
        ids = await placed_learner()

        with pytest.raises(DuplicateMembershipError):
            await services.assignment.add_to_group(ids["group_id"], ids["learner_id"])

    @pytest.mark.asyncio
    async def test_add_to_second_group_rejected(self, placed_learner, make_group, services) -> None:
        ids = await placed_learner()
        other_group = await make_group(ids["tutor_id"], ids["course_id"], name="Cohort B")

        with pytest.raises(DuplicateMembershipError):
            await services.assignment.add_to_group(other_group, ids["learner_id"])

    @pytest.mark.asyncio
    async def test_add_without_enrollment(self, make_learner, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course())
        learner_id = await make_learner()

        with pytest.raises(EnrollmentNotFoundError):
            await services.assignment.add_to_group(group_id, learner_id)

    @pytest.mark.asyncio
    async def test_remove_from_group(self, placed_learner, services, session_factory) -> None:
        ids = await placed_learner()

        enrollment = await services.assignment.remove_from_group(ids["group_id"], ids["learner_id"])

        assert enrollment.is_assigned_to_group is False
        assert enrollment.assigned_group is None
        group = await services.groups.get_group(ids["group_id"])
        assert group.members == []
        async with session_factory() as fresh:
            entries = await _tutor_entries(fresh, ids["learner_id"])
        assert entries[0].assigned_group_id is None

    @pytest.mark.asyncio
    async def test_remove_non_member(self, placed_learner, services) -> None:
        ids = await placed_learner()

        with pytest.raises(NotGroupMemberError):
            await services.assignment.remove_from_group(ids["group_id"], uuid4())


class TestTransferGroup:
    """Tests for moving a learner between groups."""

    @pytest.mark.asyncio
    async def test_transfer(self, placed_learner, make_group, services, session_factory) -> None:
        """Test learner leaves the source and joins the target."""
        ids = await placed_learner()
        target_id = await make_group(ids["tutor_id"], ids["course_id"], name="Cohort B")

        enrollment = await services.assignment.transfer_group(ids["group_id"], target_id, ids["learner_id"])

        assert enrollment.assigned_group.group_id == target_id
        assert enrollment.assigned_group.group_name == "Cohort B"
        source = await services.groups.get_group(ids["group_id"])
        target = await services.groups.get_group(target_id)
        assert ids["learner_id"] not in [m.learner_id for m in source.members]
        assert [m.learner_id for m in target.members] == [ids["learner_id"]]
        async with session_factory() as fresh:
            members = (
                await fresh.execute(select(GroupMember).where(GroupMember.learner_id == str(ids["learner_id"])))
            ).scalars().all()
            entries = await _tutor_entries(fresh, ids["learner_id"])
        assert [m.group_id for m in members] == [str(target_id)]
        assert entries[0].assigned_group_id == str(target_id)

    @pytest.mark.asyncio
    async def test_transfer_to_same_group_is_noop(self, placed_learner, services) -> None:
        ids = await placed_learner()

        enrollment = await services.assignment.transfer_group(ids["group_id"], ids["group_id"], ids["learner_id"])

        assert enrollment.assigned_group.group_id == ids["group_id"]
        group = await services.groups.get_group(ids["group_id"])
        assert [m.learner_id for m in group.members] == [ids["learner_id"]]

    @pytest.mark.asyncio
    async def test_transfer_across_courses_rejected(
        self, placed_learner, make_course, make_group, services
    ) -> None:
        ids = await placed_learner()
        other_course = await make_course()
        target_id = await make_group(ids["tutor_id"], other_course)

        with pytest.raises(GroupCourseMismatchError):
            await services.assignment.transfer_group(ids["group_id"], target_id, ids["learner_id"])

    @pytest.mark.asyncio
    async def test_transfer_non_member(self, placed_learner, make_group, make_learner, services) -> None:
        ids = await placed_learner()
        target_id = await make_group(ids["tutor_id"], ids["course_id"], name="Cohort B")

        with pytest.raises(NotGroupMemberError):
            await services.assignment.transfer_group(ids["group_id"], target_id, await make_learner())

    @pytest.mark.asyncio
    async def test_commit_failure_keeps_learner_in_source(
        self, placed_learner, make_group, db_session, session_factory
    ) -> None:
        """Test that a failed transfer leaves the learner placed in the source group only."""
        ids = await placed_learner()
        target_id = await make_group(ids["tutor_id"], ids["course_id"], name="Cohort B")
        service = AssignmentService(db_session)

        with patch.object(db_session, "commit", AsyncMock(side_effect=SQLAlchemyError("disk I/O error"))):
            with pytest.raises(TransactionAbortedError):
                await service.transfer_group(ids["group_id"], target_id, ids["learner_id"])

        learner_key = str(ids["learner_id"])
        async with session_factory() as fresh:
            members = (
                await fresh.execute(select(GroupMember).where(GroupMember.learner_id == learner_key))
            ).scalars().all()
            enrollment = (
                await fresh.execute(select(CourseEnrollment).where(CourseEnrollment.learner_id == learner_key))
            ).scalar_one()
            entries = await _tutor_entries(fresh, ids["learner_id"])

        assert [m.group_id for m in members] == [str(ids["group_id"])]
        assert enrollment.assigned_group_id == str(ids["group_id"])
        assert [e.assigned_group_id for e in entries] == [str(ids["group_id"])]
