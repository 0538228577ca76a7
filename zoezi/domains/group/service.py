# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group service for tutor-led cohorts.

This module provides the GroupService class for:
- Group creation, lookup, listing and renaming
- Group deletion, clearing every placement that points at the group
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.lookups import load_course, load_group, load_tutor
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import CourseEnrollment, Group, TutorStudent
from zoezi.models.group import CreateGroupRequest, GroupMemberResponse, GroupResponse
from zoezi.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class GroupService:
    """Service for group records.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_group(self, request: CreateGroupRequest) -> GroupResponse:
        """Create a group owned by a tutor for a course.

        Args:
            request: Group data.

        Returns:
            The created group.

        Raises:
            TutorNotFoundError: If tutor not found.
            CourseNotFoundError: If course not found.
        """
        tutor = await load_tutor(self.db, request.tutor_id)
        course = await load_course(self.db, request.course_id)

        group = Group(
            name=request.name,
            tutor_id=tutor.id,
            tutor=tutor,
            course_id=course.id,
            course_name=course.name,
            members=[],
            curriculum_items=[],
        )

        async with atomic(self.db):
            self.db.add(group)

        logger.info("Created group: id=%s, tutor=%s, course=%s", group.id, tutor.id, course.id)
        return to_group_response(group)

    async def get_group(self, group_id: UUID) -> GroupResponse:
        """Get a group.

        Raises:
            GroupNotFoundError: If group not found.
        """
        group = await load_group(self.db, group_id)
        return to_group_response(group)

    async def list_groups(self, tutor_id: UUID) -> list[GroupResponse]:
        """List a tutor's groups, oldest first."""
        result = await self.db.execute(
            select(Group)
            .where(Group.tutor_id == str(tutor_id))
            .order_by(Group.created_at)
            .execution_options(populate_existing=True)
        )
        return [to_group_response(g) for g in result.scalars().all()]

    async def rename_group(self, group_id: UUID, name: str) -> GroupResponse:
        """Rename a group and every placement that shows its name.

        Raises:
            GroupNotFoundError: If group not found.
        """
        group = await load_group(self.db, group_id)
        enrollments, entries = await self._placements(group.id)

        async with atomic(self.db):
            group.name = name
            for placement in (*enrollments, *entries):
                placement.assigned_group_name = name

        logger.info("Renamed group: id=%s", group_id)
        return to_group_response(group)

    async def delete_group(self, group_id: UUID) -> None:
        """Delete a group and clear every placement pointing at it.

        Member enrollments and tutor student entries lose their group
        placement in the same unit of work as the group's removal.

        Raises:
            GroupNotFoundError: If group not found.
        """
        group = await load_group(self.db, group_id)
        enrollments, entries = await self._placements(group.id)

        async with atomic(self.db):
            for placement in (*enrollments, *entries):
                placement.place_in_group(None, None)
            await self.db.delete(group)

        logger.info(
            "Deleted group: id=%s, cleared_enrollments=%s, cleared_tutor_entries=%s",
            group_id,
            len(enrollments),
            len(entries),
        )

    async def _placements(
        self,
        group_id: str,
    ) -> tuple[list[CourseEnrollment], list[TutorStudent]]:
        """Enrollments and tutor student entries placed in a group."""
        enrollments = await self.db.execute(
            select(CourseEnrollment).where(CourseEnrollment.assigned_group_id == group_id)
        )
        entries = await self.db.execute(
            select(TutorStudent).where(TutorStudent.assigned_group_id == group_id)
        )
        return list(enrollments.scalars().all()), list(entries.scalars().all())


def to_group_response(group: Group) -> GroupResponse:
    """Build the response model for a group."""
    return GroupResponse(
        id=group.id,
        name=group.name,
        tutor_id=group.tutor_id,
        course_id=group.course_id,
        course_name=group.course_name,
        members=[
            GroupMemberResponse(
                learner_id=m.learner_id,
                name=m.name,
                added_at=ensure_utc(m.added_at),
            )
            for m in group.members
        ],
        item_count=len(group.curriculum_items),
    )
