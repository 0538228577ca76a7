# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group, curriculum item and learner response models."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import CurriculumItemType

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class CreateGroupRequest(BaseModel):
    """Request to create a tutor-led group for a course."""

    name: str = Field(..., min_length=1, max_length=200)
    tutor_id: UUID
    course_id: UUID


class GroupMemberResponse(BaseModel):
    """A member of a group."""

    learner_id: UUID
    name: str
    added_at: datetime


class GroupResponse(BaseModel):
    """Group details."""

    id: UUID
    name: str
    tutor_id: UUID
    course_id: UUID
    course_name: str
    members: list[GroupMemberResponse] = Field(default_factory=list)
    item_count: int = 0


class Attachment(BaseModel):
    """A link attached to an item or response.

    Incomplete entries are accepted here and dropped by the curriculum
    service.
    """

    type: str | None = None
    url: str | None = None
    title: str | None = None


class CurriculumItemRequest(BaseModel):
    """Request to add a curriculum item."""

    item_type: CurriculumItemType
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    release_date: date | None = None
    release_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    due_date: date | None = None
    due_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    source_item_id: str | None = None


class CurriculumItemUpdate(BaseModel):
    """Partial update of a curriculum item. Unset fields are left alone."""

    item_type: CurriculumItemType | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    attachments: list[Attachment] | None = None
    release_date: date | None = None
    release_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    due_date: date | None = None
    due_time: str | None = Field(default=None, pattern=CLOCK_PATTERN)
    is_completed: bool | None = None


class SubmitResponseRequest(BaseModel):
    """A learner's response or question on an item."""

    response: str = Field(..., min_length=1)
    attachments: list[Attachment] = Field(default_factory=list)
    is_question: bool = False
    is_public: bool = False


class ItemResponseResponse(BaseModel):
    """A stored learner response."""

    id: UUID
    learner_id: UUID
    learner_name: str
    response: str
    attachments: list[Attachment] = Field(default_factory=list)
    is_question: bool
    is_public: bool
    tutor_remark: str | None = None
    tutor_remark_at: datetime | None = None
    created_at: datetime


class CurriculumItemResponse(BaseModel):
    """A curriculum item as seen by tutors and learners."""

    id: UUID
    position: int
    item_type: CurriculumItemType
    name: str
    description: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    release_date: date | None = None
    release_time: str
    due_date: date | None = None
    due_time: str
    is_released: bool
    is_completed: bool
    source_item_id: str | None = None
    responses: list[ItemResponseResponse] = Field(default_factory=list)
