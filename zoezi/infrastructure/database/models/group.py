# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group and curriculum models.

A group is a tutor-led cohort for one course. Its curriculum items are kept
in position order and each item collects learner responses.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, utc_now
from zoezi.utils.datetime import combine_utc

if TYPE_CHECKING:
    from zoezi.infrastructure.database.models.tutor import Tutor

DEFAULT_RELEASE_TIME = "00:00"
DEFAULT_DUE_TIME = "23:59"


class Group(IdMixin, TimestampMixin, Base):
    """A tutor-led cohort sharing one curriculum."""

    __tablename__ = "groups"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    tutor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)

    tutor: Mapped["Tutor"] = relationship(lazy="selectin")
    members: Mapped[list["GroupMember"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="GroupMember.added_at",
    )
    curriculum_items: Mapped[list["CurriculumItem"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CurriculumItem.position",
        collection_class=ordering_list("position"),
    )

    def member(self, learner_id: str) -> "GroupMember | None":
        for member in self.members:
            if member.learner_id == learner_id:
                return member
        return None

    def item(self, item_id: str) -> "CurriculumItem | None":
        for item in self.curriculum_items:
            if item.id == item_id:
                return item
        return None


class GroupMember(IdMixin, Base):
    """A learner placed in a group."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "learner_id", name="uq_group_member"),
    )

    group_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)


class CurriculumItem(IdMixin, TimestampMixin, Base):
    """One lesson, event, CAT or exam in a group's syllabus."""

    __tablename__ = "curriculum_items"

    group_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    item_type: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    attachments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    release_date: Mapped[date | None] = mapped_column(Date)
    release_time: Mapped[str] = mapped_column(String(5), nullable=False, default=DEFAULT_RELEASE_TIME)
    due_date: Mapped[date | None] = mapped_column(Date)
    due_time: Mapped[str] = mapped_column(String(5), nullable=False, default=DEFAULT_DUE_TIME)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    source_item_id: Mapped[str | None] = mapped_column(String(36))

    responses: Mapped[list["ItemResponse"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ItemResponse.created_at",
    )

    def release_at(self) -> datetime | None:
        """Moment the item opens to learners, or None when undated."""
        if self.release_date is None:
            return None
        return combine_utc(self.release_date, self.release_time or DEFAULT_RELEASE_TIME)

    def is_released(self, now: datetime) -> bool:
        release = self.release_at()
        return release is not None and release <= now

    def response(self, response_id: str) -> "ItemResponse | None":
        for response in self.responses:
            if response.id == response_id:
                return response
        return None


class ItemResponse(IdMixin, Base):
    """A learner's response or question on a curriculum item."""

    __tablename__ = "item_responses"

    item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("curriculum_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    learner_name: Mapped[str] = mapped_column(String(200), nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_question: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tutor_remark: Mapped[str | None] = mapped_column(Text)
    tutor_remark_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
