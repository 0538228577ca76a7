# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group curriculum service.

This module provides the GroupCurriculumService class for:
- Adding, updating, completing, deleting and reordering curriculum items
- Learner responses on released items
- Tutor remarks on responses
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import (
    CurriculumItemNotFoundError,
    ForbiddenError,
    ItemNotReleasedError,
    NotGroupMemberError,
    ResponseNotFoundError,
)
from zoezi.domains.lookups import load_group
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import CurriculumItem, Group, ItemResponse
from zoezi.infrastructure.database.models.group import DEFAULT_DUE_TIME, DEFAULT_RELEASE_TIME
from zoezi.models.common import CurriculumItemType
from zoezi.models.group import (
    Attachment,
    CurriculumItemRequest,
    CurriculumItemResponse,
    CurriculumItemUpdate,
    ItemResponseResponse,
    SubmitResponseRequest,
)
from zoezi.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def normalize_attachments(attachments: list[Attachment]) -> list[dict[str, Any]]:
    """Drop placeholder attachments.

    Entries typed ``none`` or lacking a url or title are removed.
    """
    return [
        a.model_dump()
        for a in attachments
        if a.type != "none" and a.url and a.title
    ]


class GroupCurriculumService:
    """Service for a group's curriculum items and responses.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def add_item(self, group_id: UUID, request: CurriculumItemRequest) -> CurriculumItemResponse:
        """Append an item to the end of the group's curriculum.

        Raises:
            GroupNotFoundError: If group not found.
        """
        group = await load_group(self.db, group_id)

        item = CurriculumItem(
            position=len(group.curriculum_items),
            item_type=request.item_type.value,
            name=request.name,
            description=request.description,
            attachments=normalize_attachments(request.attachments),
            release_date=request.release_date,
            release_time=request.release_time or DEFAULT_RELEASE_TIME,
            due_date=request.due_date,
            due_time=request.due_time or DEFAULT_DUE_TIME,
            source_item_id=request.source_item_id,
            responses=[],
        )

        async with atomic(self.db):
            group.curriculum_items.append(item)

        logger.info("Added curriculum item: group=%s, item=%s, position=%s", group_id, item.id, item.position)
        return to_item_response(item)

    async def list_items(self, group_id: UUID) -> list[CurriculumItemResponse]:
        """List a group's items in position order."""
        group = await load_group(self.db, group_id)
        now = utc_now()
        return [to_item_response(item, now) for item in group.curriculum_items]

    async def update_item(
        self,
        group_id: UUID,
        item_id: UUID,
        request: CurriculumItemUpdate,
    ) -> CurriculumItemResponse:
        """Apply a partial update to an item.

        Raises:
            GroupNotFoundError: If group not found.
            CurriculumItemNotFoundError: If item not in the group.
        """
        group = await load_group(self.db, group_id)
        item = self._get_item(group, item_id)
        changes = request.model_dump(exclude_unset=True)

        async with atomic(self.db):
            if "attachments" in changes:
                item.attachments = normalize_attachments(request.attachments or [])
            if changes.get("item_type") is not None:
                item.item_type = request.item_type.value
            if changes.get("name") is not None:
                item.name = request.name
            if "description" in changes:
                item.description = request.description
            if "release_date" in changes:
                item.release_date = request.release_date
            if "release_time" in changes:
                item.release_time = request.release_time or DEFAULT_RELEASE_TIME
            if "due_date" in changes:
                item.due_date = request.due_date
            if "due_time" in changes:
                item.due_time = request.due_time or DEFAULT_DUE_TIME
            if changes.get("is_completed") is not None:
                item.is_completed = request.is_completed

        logger.info("Updated curriculum item: group=%s, item=%s, fields=%s", group_id, item_id, sorted(changes))
        return to_item_response(item)

    async def set_item_completed(
        self,
        group_id: UUID,
        item_id: UUID,
        completed: bool = True,
    ) -> CurriculumItemResponse:
        """Mark an item completed or not completed for the whole group."""
        group = await load_group(self.db, group_id)
        item = self._get_item(group, item_id)

        async with atomic(self.db):
            item.is_completed = completed

        logger.info("Set item completion: group=%s, item=%s, completed=%s", group_id, item_id, completed)
        return to_item_response(item)

    async def delete_item(self, group_id: UUID, item_id: UUID) -> None:
        """Remove an item; the remaining items are renumbered."""
        group = await load_group(self.db, group_id)
        item = self._get_item(group, item_id)

        async with atomic(self.db):
            group.curriculum_items.remove(item)

        logger.info("Deleted curriculum item: group=%s, item=%s", group_id, item_id)

    async def reorder_items(self, group_id: UUID, item_ids: list[UUID]) -> list[CurriculumItemResponse]:
        """Reorder items.

        Listed items take their list index as position. Unlisted items
        follow in their previous order and unknown ids are ignored.
        """
        group = await load_group(self.db, group_id)
        known = {item.id for item in group.curriculum_items}

        order: list[str] = []
        for item_id in item_ids:
            key = str(item_id)
            if key in known and key not in order:
                order.append(key)
        order.extend(item.id for item in group.curriculum_items if item.id not in order)
        rank = {key: index for index, key in enumerate(order)}

        async with atomic(self.db):
            group.curriculum_items.sort(key=lambda item: rank[item.id])
            group.curriculum_items.reorder()

        logger.info("Reordered curriculum: group=%s, items=%s", group_id, len(order))
        return [to_item_response(item) for item in group.curriculum_items]

    async def submit_response(
        self,
        group_id: UUID,
        item_id: UUID,
        learner_id: UUID,
        request: SubmitResponseRequest,
    ) -> ItemResponseResponse:
        """Record a learner's response or question on an item.

        Raises:
            GroupNotFoundError: If group not found.
            CurriculumItemNotFoundError: If item not in the group.
            NotGroupMemberError: If learner is not in the group.
            ItemNotReleasedError: If the item opens in the future.
        """
        group = await load_group(self.db, group_id)
        item = self._get_item(group, item_id)

        member = group.member(str(learner_id))
        if member is None:
            raise NotGroupMemberError(
                "Learner is not a member of this group",
                {"group_id": str(group_id), "learner_id": str(learner_id)},
            )

        release_at = item.release_at()
        if release_at is not None and release_at > utc_now():
            raise ItemNotReleasedError(
                "This item has not been released yet",
                {"item_id": str(item_id), "release_at": release_at.isoformat()},
            )

        response = ItemResponse(
            learner_id=member.learner_id,
            learner_name=member.name,
            response=request.response,
            attachments=normalize_attachments(request.attachments),
            is_question=request.is_question,
            is_public=request.is_public,
        )

        async with atomic(self.db):
            item.responses.append(response)

        logger.info("Response submitted: group=%s, item=%s, learner=%s", group_id, item_id, learner_id)
        return to_response_response(response)

    async def add_remark(
        self,
        group_id: UUID,
        item_id: UUID,
        response_id: UUID,
        remark: str,
        tutor_id: UUID | None = None,
    ) -> ItemResponseResponse:
        """Attach a tutor remark to a learner response.

        Raises:
            ForbiddenError: If tutor_id is given and does not own the group.
        """
        group = await load_group(self.db, group_id)
        if tutor_id is not None and str(tutor_id) != group.tutor_id:
            raise ForbiddenError("Only the group's tutor can remark on responses", {"group_id": str(group_id)})

        response = self._get_response(self._get_item(group, item_id), response_id)

        async with atomic(self.db):
            response.tutor_remark = remark
            response.tutor_remark_at = utc_now()

        logger.info("Remark added: group=%s, response=%s", group_id, response_id)
        return to_response_response(response)

    async def delete_response(
        self,
        group_id: UUID,
        item_id: UUID,
        response_id: UUID,
        actor_id: UUID | None = None,
    ) -> None:
        """Delete a response.

        When actor_id is given it must be the response's learner or the
        group's tutor.

        Raises:
            ForbiddenError: If the actor may not delete the response.
        """
        group = await load_group(self.db, group_id)
        item = self._get_item(group, item_id)
        response = self._get_response(item, response_id)

        if actor_id is not None and str(actor_id) not in (response.learner_id, group.tutor_id):
            raise ForbiddenError("Not allowed to delete this response", {"response_id": str(response_id)})

        async with atomic(self.db):
            item.responses.remove(response)

        logger.info("Response deleted: group=%s, response=%s", group_id, response_id)

    def _get_item(self, group: Group, item_id: UUID) -> CurriculumItem:
        item = group.item(str(item_id))
        if item is None:
            raise CurriculumItemNotFoundError(
                f"Curriculum item {item_id} not found",
                {"group_id": group.id, "item_id": str(item_id)},
            )
        return item

    def _get_response(self, item: CurriculumItem, response_id: UUID) -> ItemResponse:
        response = item.response(str(response_id))
        if response is None:
            raise ResponseNotFoundError(
                f"Response {response_id} not found",
                {"item_id": item.id, "response_id": str(response_id)},
            )
        return response


def to_response_response(response: ItemResponse) -> ItemResponseResponse:
    return ItemResponseResponse(
        id=response.id,
        learner_id=response.learner_id,
        learner_name=response.learner_name,
        response=response.response,
        attachments=[Attachment(**a) for a in response.attachments or []],
        is_question=response.is_question,
        is_public=response.is_public,
        tutor_remark=response.tutor_remark,
        tutor_remark_at=ensure_utc(response.tutor_remark_at),
        created_at=ensure_utc(response.created_at),
    )


def to_item_response(item: CurriculumItem, now: datetime | None = None) -> CurriculumItemResponse:
    """Build the response model for an item, deriving is_released."""
    return CurriculumItemResponse(
        id=item.id,
        position=item.position,
        item_type=CurriculumItemType(item.item_type),
        name=item.name,
        description=item.description,
        attachments=[Attachment(**a) for a in item.attachments or []],
        release_date=item.release_date,
        release_time=item.release_time,
        due_date=item.due_date,
        due_time=item.due_time,
        is_released=item.is_released(now or utc_now()),
        is_completed=item.is_completed,
        source_item_id=item.source_item_id,
        responses=[to_response_response(r) for r in item.responses],
    )
