# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models for the lifecycle services."""

from zoezi.models.common import (
    GRADE_POINTS,
    AssignmentStatus,
    CertificationStatus,
    CPDResult,
    CurriculumItemType,
    DurationType,
    Grade,
    LearnerKind,
    PaymentStatus,
    SubscriptionPaymentMethod,
    SubscriptionPaymentStatus,
    TransactionPurpose,
)

__all__ = [
    "GRADE_POINTS",
    "AssignmentStatus",
    "CertificationStatus",
    "CPDResult",
    "CurriculumItemType",
    "DurationType",
    "Grade",
    "LearnerKind",
    "PaymentStatus",
    "SubscriptionPaymentMethod",
    "SubscriptionPaymentStatus",
    "TransactionPurpose",
]
