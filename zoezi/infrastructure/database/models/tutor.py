# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor models.

A tutor holds its currently active learner assignments and, separately,
snapshots of the learners it has certified. A (learner, course) pair lives
in at most one of the two lists.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, utc_now
from zoezi.infrastructure.database.models.course import course_tutors

if TYPE_CHECKING:
    from zoezi.infrastructure.database.models.course import Course


class Tutor(IdMixin, TimestampMixin, Base):
    """A tutor."""

    __tablename__ = "tutors"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(30))
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="tutor")
    kra_pin: Mapped[str | None] = mapped_column(String(20))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    join_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    courses: Mapped[list["Course"]] = relationship(
        secondary=course_tutors,
        back_populates="tutors",
        lazy="selectin",
    )
    students: Mapped[list["TutorStudent"]] = relationship(
        back_populates="tutor",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TutorStudent.assigned_at",
    )
    certified_students: Mapped[list["CertifiedStudent"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CertifiedStudent.certification_date",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def student_entry(self, learner_id: str, course_id: str) -> "TutorStudent | None":
        """Return the active entry for (learner, course), if any."""
        for entry in self.students:
            if entry.learner_id == learner_id and entry.course_id == course_id:
                return entry
        return None


class TutorStudent(IdMixin, Base):
    """An active learner assignment held by a tutor."""

    __tablename__ = "tutor_students"
    __table_args__ = (
        UniqueConstraint("tutor_id", "learner_id", "course_id", name="uq_tutor_student_course"),
    )

    tutor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(10), nullable=False)
    learner_kind: Mapped[str] = mapped_column(String(20), nullable=False)

    is_assigned_to_group: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_group_id: Mapped[str | None] = mapped_column(String(36), index=True)
    assigned_group_name: Mapped[str | None] = mapped_column(String(200))

    settlement_status: Mapped[str] = mapped_column(String(10), nullable=False, default="PENDING")
    settlement_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    settlement_phone: Mapped[str | None] = mapped_column(String(30))
    settlement_transaction_id: Mapped[str | None] = mapped_column(String(100))
    settlement_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    tutor: Mapped[Tutor] = relationship(back_populates="students")

    def place_in_group(self, group_id: str | None, group_name: str | None) -> None:
        """Set or clear the group placement."""
        self.is_assigned_to_group = group_id is not None
        self.assigned_group_id = group_id
        self.assigned_group_name = group_name

    def settlement_snapshot(self) -> dict[str, Any]:
        return {
            "status": self.settlement_status,
            "amount": str(self.settlement_amount) if self.settlement_amount is not None else None,
            "phone": self.settlement_phone,
            "transaction_id": self.settlement_transaction_id,
            "time_of_payment": self.settlement_time.isoformat() if self.settlement_time else None,
        }


class CertifiedStudent(IdMixin, Base):
    """Snapshot of a learner a tutor has certified for a course."""

    __tablename__ = "certified_students"

    tutor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    learner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    learner_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    payment: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    settlement: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    exams: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    gpa: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    final_grade: Mapped[str | None] = mapped_column(String(20))
    certification_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
