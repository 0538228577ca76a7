# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Alumni subscription models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from zoezi.models.common import SubscriptionPaymentMethod, SubscriptionPaymentStatus
from zoezi.models.learner import SubscriptionState


class PurchaseSubscriptionRequest(BaseModel):
    """Request to buy years of alumni subscription."""

    years: int = Field(..., ge=1, le=10)
    amount: Decimal = Field(..., gt=0)
    payment_method: SubscriptionPaymentMethod = SubscriptionPaymentMethod.MPESA
    transaction_id: str | None = None
    phone: str | None = None
    payment_date: datetime | None = None


class SubscriptionPaymentResponse(BaseModel):
    """A stored subscription payment."""

    id: UUID
    years: int
    amount: Decimal
    payment_date: datetime
    expiry_date: datetime
    payment_method: SubscriptionPaymentMethod
    transaction_id: str | None = None
    phone: str | None = None
    status: SubscriptionPaymentStatus


class SubscriptionPurchaseResult(BaseModel):
    """Subscription state after a purchase."""

    payment: SubscriptionPaymentResponse
    subscription: SubscriptionState
