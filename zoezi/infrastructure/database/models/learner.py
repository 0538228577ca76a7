# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner models.

A learner is a single row tagged with its lifecycle kind (student or
alumni). Course enrollments, their exams, CPD records and subscription
payments are owned child rows.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin, utc_now
from zoezi.models.common import (
    AssignmentStatus,
    CertificationStatus,
    LearnerKind,
    PaymentStatus,
)


class Learner(IdMixin, TimestampMixin, Base):
    """A student or alumnus."""

    __tablename__ = "learners"

    kind: Mapped[str] = mapped_column(String(20), nullable=False, default=LearnerKind.STUDENT.value, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(30))
    id_number: Mapped[str | None] = mapped_column(String(50))
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    password_hash: Mapped[str | None] = mapped_column(String(255))
    admission_number: Mapped[str | None] = mapped_column(String(20), unique=True)
    current_location: Mapped[str | None] = mapped_column(String(200))

    next_of_kin_name: Mapped[str | None] = mapped_column(String(200))
    next_of_kin_relationship: Mapped[str | None] = mapped_column(String(50))
    next_of_kin_phone: Mapped[str | None] = mapped_column(String(30))

    profile_picture_url: Mapped[str | None] = mapped_column(String(500))
    profile_picture_storage_id: Mapped[str | None] = mapped_column(String(255))
    is_public_profile_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    graduation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    subscription_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subscription_expiry_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    years_subscribed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    enrollments: Mapped[list["CourseEnrollment"]] = relationship(
        back_populates="learner",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CourseEnrollment.enrolled_at",
    )
    cpd_records: Mapped[list["CPDRecord"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    subscription_payments: Mapped[list["SubscriptionPayment"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SubscriptionPayment.payment_date",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def enrollment_for(self, course_id: str) -> "CourseEnrollment | None":
        """Return this learner's enrollment in a course, if any."""
        for enrollment in self.enrollments:
            if enrollment.course_id == course_id:
                return enrollment
        return None


class CourseEnrollment(IdMixin, Base):
    """A learner's per-course state."""

    __tablename__ = "course_enrollments"
    __table_args__ = (
        UniqueConstraint("learner_id", "course_id", name="uq_enrollment_learner_course"),
    )

    learner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer)
    duration_type: Mapped[str | None] = mapped_column(String(10))

    payment_status: Mapped[str] = mapped_column(String(10), nullable=False, default=PaymentStatus.PENDING.value)
    payment_phone: Mapped[str | None] = mapped_column(String(30))
    payment_transaction_id: Mapped[str | None] = mapped_column(String(100))
    payment_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    time_of_payment: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    admin_notes: Mapped[str | None] = mapped_column(Text)
    assignment_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=AssignmentStatus.PENDING.value
    )

    tutor_id: Mapped[str | None] = mapped_column(String(36))
    tutor_name: Mapped[str | None] = mapped_column(String(200))
    tutor_email: Mapped[str | None] = mapped_column(String(255))
    tutor_phone: Mapped[str | None] = mapped_column(String(30))
    tutor_status: Mapped[str | None] = mapped_column(String(10))

    is_assigned_to_group: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assigned_group_id: Mapped[str | None] = mapped_column(String(36), index=True)
    assigned_group_name: Mapped[str | None] = mapped_column(String(200))
    payment_notification_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    gpa: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    final_grade: Mapped[str | None] = mapped_column(String(20))
    certification_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    certification_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=CertificationStatus.PENDING.value
    )

    learner: Mapped[Learner] = relationship(back_populates="enrollments")
    exams: Mapped[list["Exam"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Exam.position",
        collection_class=ordering_list("position"),
    )

    def place_in_group(self, group_id: str | None, group_name: str | None) -> None:
        """Set or clear the group placement."""
        self.is_assigned_to_group = group_id is not None
        self.assigned_group_id = group_id
        self.assigned_group_name = group_name


class Exam(IdMixin, Base):
    """A graded exam recorded against an enrollment."""

    __tablename__ = "exams"

    enrollment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("course_enrollments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exam_name: Mapped[str] = mapped_column(String(200), nullable=False)
    grade: Mapped[str] = mapped_column(String(20), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)


class CPDRecord(IdMixin, TimestampMixin, Base):
    """Continuing professional development exam record."""

    __tablename__ = "cpd_records"

    learner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    date_taken: Mapped[date] = mapped_column(Date, nullable=False)
    result: Mapped[str] = mapped_column(String(10), nullable=False)
    score: Mapped[float | None] = mapped_column(Float)
    remarks: Mapped[str | None] = mapped_column(Text)


class SubscriptionPayment(IdMixin, TimestampMixin, Base):
    """One alumni subscription purchase."""

    __tablename__ = "subscription_payments"

    learner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("learners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    years: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    expiry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(100))
    phone: Mapped[str | None] = mapped_column(String(30))
    status: Mapped[str] = mapped_column(String(10), nullable=False)
