# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common enums and value tables shared across the lifecycle domains."""

from enum import StrEnum


class LearnerKind(StrEnum):
    """Lifecycle stage of a learner record."""

    STUDENT = "student"
    ALUMNI = "alumni"


class PaymentStatus(StrEnum):
    """Course payment status."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class AssignmentStatus(StrEnum):
    """Tutor assignment status of an enrollment."""

    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    CANCELLED = "CANCELLED"


class CertificationStatus(StrEnum):
    """Certification status of an enrollment."""

    PENDING = "PENDING"
    CERTIFIED = "CERTIFIED"
    GRADUATED = "GRADUATED"


class Grade(StrEnum):
    """Exam grade."""

    DISTINCTION = "Distinction"
    MERIT = "Merit"
    CREDIT = "Credit"
    PASS = "Pass"
    FAIL = "Fail"


GRADE_POINTS: dict[Grade, float] = {
    Grade.DISTINCTION: 4.0,
    Grade.MERIT: 3.7,
    Grade.CREDIT: 3.0,
    Grade.PASS: 2.0,
    Grade.FAIL: 0.0,
}


class DurationType(StrEnum):
    """Unit of a course duration."""

    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class CurriculumItemType(StrEnum):
    """Kind of curriculum item."""

    LESSON = "lesson"
    EVENT = "event"
    CAT = "cat"
    EXAM = "exam"


class CPDResult(StrEnum):
    """Outcome of a continuing professional development exam."""

    PASS = "pass"
    FAIL = "fail"


class SubscriptionPaymentMethod(StrEnum):
    """Accepted subscription payment methods."""

    MPESA = "mpesa"
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    PAYPAL = "paypal"


class SubscriptionPaymentStatus(StrEnum):
    """Subscription payment status."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TransactionPurpose(StrEnum):
    """What a payment-gateway transaction was consumed for."""

    COURSE_PURCHASE = "course_purchase"
    SUBSCRIPTION_PAYMENT = "subscription_payment"
