# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog models.

The roster is the course-side mirror of learner enrollments and is kept in
step by the lifecycle services.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, utc_now
from zoezi.models.common import AssignmentStatus, PaymentStatus

if TYPE_CHECKING:
    from zoezi.infrastructure.database.models.tutor import Tutor


course_tutors = Table(
    "course_tutors",
    Base.metadata,
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("tutor_id", String(36), ForeignKey("tutors.id", ondelete="CASCADE"), primary_key=True),
)


class Course(IdMixin, TimestampMixin, Base):
    """A course offered by the school."""

    __tablename__ = "courses"

    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    course_type: Mapped[str | None] = mapped_column(String(50))
    course_tier: Mapped[str | None] = mapped_column(String(50))
    duration: Mapped[int | None] = mapped_column(Integer)
    duration_type: Mapped[str | None] = mapped_column(String(10))
    course_fee: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    offer_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    tutors: Mapped[list["Tutor"]] = relationship(
        secondary=course_tutors,
        back_populates="courses",
        lazy="selectin",
    )
    roster: Mapped[list["CourseRosterEntry"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CourseRosterEntry.enrolled_at",
    )

    def roster_entry_for(self, learner_id: str) -> "CourseRosterEntry | None":
        """Return the roster entry of a learner, if any."""
        for entry in self.roster:
            if entry.learner_id == learner_id:
                return entry
        return None


class CourseRosterEntry(IdMixin, Base):
    """Denormalized mirror of one learner's enrollment on the course."""

    __tablename__ = "course_roster_entries"
    __table_args__ = (
        UniqueConstraint("course_id", "learner_id", name="uq_roster_course_learner"),
    )

    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    learner_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    payment_status: Mapped[str] = mapped_column(String(10), nullable=False, default=PaymentStatus.PENDING.value)
    payment_phone: Mapped[str | None] = mapped_column(String(30))
    payment_transaction_id: Mapped[str | None] = mapped_column(String(100))
    payment_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    time_of_payment: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    assignment_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=AssignmentStatus.PENDING.value
    )
    admin_notes: Mapped[str | None] = mapped_column(Text)
    tutor_id: Mapped[str | None] = mapped_column(String(36))
    tutor_name: Mapped[str | None] = mapped_column(String(200))
    tutor_email: Mapped[str | None] = mapped_column(String(255))
    tutor_phone: Mapped[str | None] = mapped_column(String(30))
    tutor_status: Mapped[str | None] = mapped_column(String(10))

    course: Mapped[Course] = relationship(back_populates="roster")
