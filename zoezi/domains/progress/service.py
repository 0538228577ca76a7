# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress tracker for group curricula.

Completion is measured per group: an item is done for every member once the
tutor marks it completed.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.enrollment.service import exam_to_record
from zoezi.domains.errors import ForbiddenError
from zoezi.domains.lookups import load_group, load_tutor
from zoezi.infrastructure.database.models import CurriculumItem, Group, Learner
from zoezi.models.common import CertificationStatus, Grade, LearnerKind, PaymentStatus
from zoezi.models.progress import CompletionResult, GroupCertificationRoster, RosterLearner

logger = logging.getLogger(__name__)


def completion_of(items: list[CurriculumItem]) -> CompletionResult:
    """Completion of a list of curriculum items.

    The percentage is rounded with halves going up and is 0 for an empty
    curriculum.
    """
    total = len(items)
    completed = sum(1 for item in items if item.is_completed)
    percentage = (200 * completed + total) // (2 * total) if total else 0
    return CompletionResult(completed=completed, total=total, percentage=percentage)


class ProgressService:
    """Service for curriculum completion and certification rosters.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def compute_completion(self, group_id: UUID) -> CompletionResult:
        """Compute completion of a group's curriculum.

        Raises:
            GroupNotFoundError: If group not found.
        """
        group = await load_group(self.db, group_id)
        return completion_of(group.curriculum_items)

    async def certification_roster(
        self,
        tutor_id: UUID,
        group_id: UUID | None = None,
    ) -> list[GroupCertificationRoster]:
        """Build the certification view of a tutor's groups.

        Args:
            tutor_id: Tutor identifier.
            group_id: Restrict to one group, which must belong to the tutor.

        Returns:
            One roster per group.

        Raises:
            TutorNotFoundError: If tutor not found.
            GroupNotFoundError: If group_id is given and not found.
            ForbiddenError: If the group belongs to another tutor.
        """
        tutor = await load_tutor(self.db, tutor_id)

        if group_id is not None:
            group = await load_group(self.db, group_id)
            if group.tutor_id != tutor.id:
                raise ForbiddenError(
                    "Group does not belong to this tutor",
                    {"group_id": group.id, "tutor_id": tutor.id},
                )
            groups = [group]
        else:
            result = await self.db.execute(
                select(Group)
                .where(Group.tutor_id == tutor.id)
                .order_by(Group.created_at)
                .execution_options(populate_existing=True)
            )
            groups = list(result.scalars().all())

        learner_ids = {m.learner_id for g in groups for m in g.members}
        learners: dict[str, Learner] = {}
        if learner_ids:
            result = await self.db.execute(
                select(Learner)
                .where(Learner.id.in_(learner_ids))
                .execution_options(populate_existing=True)
            )
            learners = {learner.id: learner for learner in result.scalars().all()}

        return [self._group_roster(g, learners) for g in groups]

    def _group_roster(self, group: Group, learners: dict[str, Learner]) -> GroupCertificationRoster:
        completion = completion_of(group.curriculum_items)
        rows: list[RosterLearner] = []

        for member in group.members:
            learner = learners.get(member.learner_id)
            if learner is None:
                logger.warning("Group %s lists unknown learner %s", group.id, member.learner_id)
                continue

            enrollment = learner.enrollment_for(group.course_id)
            rows.append(
                RosterLearner(
                    learner_id=learner.id,
                    name=learner.full_name,
                    learner_kind=LearnerKind(learner.kind),
                    completion_percentage=completion.percentage,
                    payment_status=PaymentStatus(enrollment.payment_status) if enrollment else None,
                    exams=[exam_to_record(e) for e in enrollment.exams] if enrollment else [],
                    gpa=enrollment.gpa if enrollment else 0.0,
                    final_grade=Grade(enrollment.final_grade) if enrollment and enrollment.final_grade else None,
                    certification_status=(
                        CertificationStatus(enrollment.certification_status) if enrollment else None
                    ),
                )
            )

        return GroupCertificationRoster(
            group_id=group.id,
            group_name=group.name,
            course_id=group.course_id,
            course_name=group.course_name,
            completion=completion,
            learners=rows,
        )
