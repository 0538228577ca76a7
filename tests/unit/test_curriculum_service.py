# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the group curriculum service."""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from zoezi.domains.group import (
    CurriculumItemNotFoundError,
    ForbiddenError,
    ItemNotReleasedError,
    NotGroupMemberError,
    ResponseNotFoundError,
    normalize_attachments,
)
from zoezi.models.common import CurriculumItemType
from zoezi.models.group import (
    Attachment,
    CurriculumItemRequest,
    CurriculumItemUpdate,
    SubmitResponseRequest,
)
from zoezi.utils.datetime import utc_now


def _lesson(name: str, **extra) -> CurriculumItemRequest:
    return CurriculumItemRequest(item_type=CurriculumItemType.LESSON, name=name, **extra)


class TestAttachments:
    """Tests for attachment normalization."""

    def test_placeholders_dropped(self) -> None:
        attachments = [
            Attachment(type="pdf", url="https://cdn.example.com/notes.pdf", title="Notes"),
            Attachment(type="none", url="https://cdn.example.com/x", title="X"),
            Attachment(type="link", url=None, title="Missing url"),
            Attachment(type="link", url="https://example.com", title=""),
        ]

        result = normalize_attachments(attachments)

        assert result == [{"type": "pdf", "url": "https://cdn.example.com/notes.pdf", "title": "Notes"}]


class TestItems:
    """Tests for adding, updating and removing items."""

    @pytest.mark.asyncio
    async def test_add_items_in_order(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course())

        first = await services.curriculum.add_item(group_id, _lesson("Anatomy"))
        second = await services.curriculum.add_item(
            group_id,
            CurriculumItemRequest(item_type=CurriculumItemType.CAT, name="CAT 1", due_date=date(2030, 1, 10)),
        )

        items = await services.curriculum.list_items(group_id)
        assert [i.id for i in items] == [first.id, second.id]
        assert [i.position for i in items] == [0, 1]
        assert second.release_time == "00:00"
        assert second.due_time == "23:59"
        assert first.is_released is False
        assert first.is_completed is False

    @pytest.mark.asyncio
    async def test_release_flag(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course())
        today = utc_now().date()

        past = await services.curriculum.add_item(
            group_id, _lesson("Past", release_date=today - timedelta(days=1))
        )
        future = await services.curriculum.add_item(
            group_id, _lesson("Future", release_date=today + timedelta(days=2))
        )

        assert past.is_released is True
        assert future.is_released is False

    @pytest.mark.asyncio
    async def test_partial_update(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course())
        item = await services.curriculum.add_item(group_id, _lesson("Anatomy", description="Bones"))

        updated = await services.curriculum.update_item(
            group_id, item.id, CurriculumItemUpdate(name="Anatomy I", due_time="17:00")
        )

        assert updated.name == "Anatomy I"
        assert updated.description == "Bones"
        assert updated.due_time == "17:00"

    @pytest.mark.asyncio
    async def test_set_completed(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course(), items=2)
        items = await services.curriculum.list_items(group_id)

        result = await services.curriculum.set_item_completed(group_id, items[0].id)

        assert result.is_completed is True
        completion = await services.progress.compute_completion(group_id)
        assert (completion.completed, completion.total, completion.percentage) == (1, 2, 50)

    @pytest.mark.asyncio
    async def test_delete_renumbers(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course(), items=3)
        items = await services.curriculum.list_items(group_id)

        await services.curriculum.delete_item(group_id, items[0].id)

        remaining = await services.curriculum.list_items(group_id)
        assert [i.id for i in remaining] == [items[1].id, items[2].id]
        assert [i.position for i in remaining] == [0, 1]

    @pytest.mark.asyncio
    async def test_reorder(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course(), items=3)
        a, b, c = await services.curriculum.list_items(group_id)

        await services.curriculum.reorder_items(group_id, [c.id, uuid4(), a.id])

        items = await services.curriculum.list_items(group_id)
        assert [i.id for i in items] == [c.id, a.id, b.id]
        assert [i.position for i in items] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_unknown_item(self, make_tutor, make_course, make_group, services) -> None:
        group_id = await make_group(await make_tutor(), await make_course())

        with pytest.raises(CurriculumItemNotFoundError):
            await services.curriculum.set_item_completed(group_id, uuid4())


class TestResponses:
    """Tests for learner responses and tutor remarks."""

    @pytest.mark.asyncio
    async def test_member_submits_response(self, placed_learner, services) -> None:
        ids = await placed_learner(items=1)
        item = (await services.curriculum.list_items(ids["group_id"]))[0]

        response = await services.curriculum.submit_response(
            ids["group_id"],
            item.id,
            ids["learner_id"],
            SubmitResponseRequest(response="What is the origin of the biceps?", is_question=True),
        )

        assert response.learner_id == ids["learner_id"]
        assert response.is_question is True
        items = await services.curriculum.list_items(ids["group_id"])
        assert [r.id for r in items[0].responses] == [response.id]

    @pytest.mark.asyncio
    async def test_non_member_rejected(self, placed_learner, make_learner, services) -> None:
        ids = await placed_learner(items=1)
        outsider_id = await make_learner()
        item = (await services.curriculum.list_items(ids["group_id"]))[0]

        with pytest.raises(NotGroupMemberError):
            await services.curriculum.submit_response(
                ids["group_id"], item.id, outsider_id, SubmitResponseRequest(response="Hi")
            )

    @pytest.mark.asyncio
    async def test_unreleased_item_rejected(self, placed_learner, services) -> None:
        ids = await placed_learner(items=0)
        item = await services.curriculum.add_item(
            ids["group_id"], _lesson("Later", release_date=utc_now().date() + timedelta(days=3))
        )

        with pytest.raises(ItemNotReleasedError):
            await services.curriculum.submit_response(
                ids["group_id"], item.id, ids["learner_id"], SubmitResponseRequest(response="Early")
            )

    @pytest.mark.asyncio
    async def test_remark_by_group_tutor(self, placed_learner, make_tutor, services) -> None:
        ids = await placed_learner(items=1)
        item = (await services.curriculum.list_items(ids["group_id"]))[0]
        response = await services.curriculum.submit_response(
            ids["group_id"], item.id, ids["learner_id"], SubmitResponseRequest(response="Done")
        )

        with pytest.raises(ForbiddenError):
            await services.curriculum.add_remark(
                ids["group_id"], item.id, response.id, "Nice", tutor_id=await make_tutor()
            )

        remarked = await services.curriculum.add_remark(
            ids["group_id"], item.id, response.id, "Well done", tutor_id=ids["tutor_id"]
        )
        assert remarked.tutor_remark == "Well done"
        assert remarked.tutor_remark_at is not None

    @pytest.mark.asyncio
    async def test_delete_response(self, placed_learner, make_learner, services) -> None:
        ids = await placed_learner(items=1)
        item = (await services.curriculum.list_items(ids["group_id"]))[0]
        response = await services.curriculum.submit_response(
            ids["group_id"], item.id, ids["learner_id"], SubmitResponseRequest(response="Oops")
        )

        with pytest.raises(ForbiddenError):
            await services.curriculum.delete_response(
                ids["group_id"], item.id, response.id, actor_id=await make_learner()
            )

        await services.curriculum.delete_response(
            ids["group_id"], item.id, response.id, actor_id=ids["learner_id"]
        )

        with pytest.raises(ResponseNotFoundError):
            await services.curriculum.add_remark(ids["group_id"], item.id, response.id, "Late")
