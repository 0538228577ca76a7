# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record lookups shared by the lifecycle services.

Each loader refreshes the identity-map copy from the database so an
operation always starts from committed state, and raises the matching
NotFoundError subclass when the row is missing.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import (
    CourseNotFoundError,
    GroupNotFoundError,
    LearnerNotFoundError,
    TutorNotFoundError,
)
from zoezi.infrastructure.database.models import Course, Group, Learner, Tutor


async def load_learner(db: AsyncSession, learner_id: UUID | str) -> Learner:
    learner = await _load(db, Learner, learner_id)
    if learner is None:
        raise LearnerNotFoundError(f"Learner {learner_id} not found", {"learner_id": str(learner_id)})
    return learner


async def load_tutor(db: AsyncSession, tutor_id: UUID | str) -> Tutor:
    tutor = await _load(db, Tutor, tutor_id)
    if tutor is None:
        raise TutorNotFoundError(f"Tutor {tutor_id} not found", {"tutor_id": str(tutor_id)})
    return tutor


async def load_course(db: AsyncSession, course_id: UUID | str) -> Course:
    course = await _load(db, Course, course_id)
    if course is None:
        raise CourseNotFoundError(f"Course {course_id} not found", {"course_id": str(course_id)})
    return course


async def load_group(db: AsyncSession, group_id: UUID | str) -> Group:
    group = await _load(db, Group, group_id)
    if group is None:
        raise GroupNotFoundError(f"Group {group_id} not found", {"group_id": str(group_id)})
    return group


async def _load(db: AsyncSession, model, record_id: UUID | str):
    result = await db.execute(
        select(model)
        .where(model.id == str(record_id))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
