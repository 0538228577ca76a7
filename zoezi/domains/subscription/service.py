# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Subscription service for alumni annual subscriptions.

This module provides the SubscriptionService class for:
- Purchasing years of subscription
- Cancelling auto-renewal
- Listing a learner's subscription payments
- Deactivating lapsed subscriptions
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import LearnerNotFoundError
from zoezi.domains.identity.service import subscription_state
from zoezi.domains.lookups import load_learner
from zoezi.domains.payment.service import PaymentService
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import Learner, SubscriptionPayment
from zoezi.infrastructure.notifications.service import NotificationService
from zoezi.models.common import (
    LearnerKind,
    SubscriptionPaymentMethod,
    SubscriptionPaymentStatus,
    TransactionPurpose,
)
from zoezi.models.learner import SubscriptionState
from zoezi.models.subscription import (
    PurchaseSubscriptionRequest,
    SubscriptionPaymentResponse,
    SubscriptionPurchaseResult,
)
from zoezi.utils.datetime import add_years, ensure_utc, is_expired, utc_now

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for alumni subscriptions.

    Attributes:
        db: Async database session.
        payments: Ledger used to mark paying transactions.
        notifier: Optional best-effort notifier.
    """

    def __init__(self, db: AsyncSession, notifier: NotificationService | None = None) -> None:
        """Initialize subscription service.

        Args:
            db: Async database session.
            notifier: Notification service called after commit.
        """
        self.db = db
        self.payments = PaymentService(db)
        self.notifier = notifier

    async def purchase(
        self,
        learner_id: UUID,
        request: PurchaseSubscriptionRequest,
    ) -> SubscriptionPurchaseResult:
        """Buy years of subscription for an alumnus.

        The new expiry counts from the payment date, or from the current
        expiry when an active subscription runs past the payment date.

        Args:
            learner_id: Alumnus identifier.
            request: Purchase data.

        Returns:
            The stored payment and the resulting subscription state.

        Raises:
            LearnerNotFoundError: If no alumnus with this id exists.
            TransactionAbortedError: If the unit of work could not commit.
        """
        learner = await self._load_alumnus(learner_id)

        payment_date = ensure_utc(request.payment_date) or utc_now()
        current_expiry = ensure_utc(learner.subscription_expiry_date)
        start = payment_date
        if learner.subscription_active and current_expiry is not None and current_expiry > payment_date:
            start = current_expiry
        expiry = add_years(start, request.years)

        payment = SubscriptionPayment(
            years=request.years,
            amount=request.amount,
            payment_date=payment_date,
            expiry_date=expiry,
            payment_method=request.payment_method.value,
            transaction_id=request.transaction_id,
            phone=request.phone,
            status=SubscriptionPaymentStatus.PAID.value,
        )

        async with atomic(self.db):
            learner.subscription_payments.append(payment)
            learner.subscription_active = True
            learner.subscription_expiry_date = expiry
            learner.years_subscribed = (learner.years_subscribed or 0) + request.years
            learner.last_payment_date = payment_date
            learner.auto_renew = False
            if request.transaction_id:
                await self.payments.mark_used(
                    request.transaction_id,
                    TransactionPurpose.SUBSCRIPTION_PAYMENT,
                    {"learner_id": learner.id, "years": request.years},
                )

        logger.info(
            "Subscription purchased: learner=%s, years=%s, expiry=%s",
            learner.id,
            request.years,
            expiry.date().isoformat(),
        )

        if self.notifier is not None:
            await self.notifier.notify(
                "subscription_confirmed",
                learner.email,
                {
                    "recipient_name": learner.full_name,
                    "expiry_date": expiry.date().isoformat(),
                    "years": request.years,
                },
            )

        return SubscriptionPurchaseResult(
            payment=to_payment_response(payment),
            subscription=subscription_state(learner),
        )

    async def cancel_auto_renew(self, learner_id: UUID) -> SubscriptionState:
        """Turn off auto-renewal.

        Raises:
            LearnerNotFoundError: If no alumnus with this id exists.
        """
        learner = await self._load_alumnus(learner_id)

        async with atomic(self.db):
            learner.auto_renew = False

        logger.info("Auto-renew cancelled: learner=%s", learner.id)
        return subscription_state(learner)

    async def history(self, learner_id: UUID) -> list[SubscriptionPaymentResponse]:
        """List a learner's subscription payments, newest first."""
        learner = await load_learner(self.db, learner_id)
        payments = sorted(
            learner.subscription_payments,
            key=lambda p: ensure_utc(p.payment_date),
            reverse=True,
        )
        return [to_payment_response(p) for p in payments]

    async def expire_lapsed(self, now: datetime | None = None) -> int:
        """Deactivate every active subscription whose expiry has passed.

        Args:
            now: Reference time, defaults to the current UTC time.

        Returns:
            Number of subscriptions deactivated.
        """
        now = now or utc_now()
        result = await self.db.execute(
            select(Learner)
            .where(Learner.subscription_active.is_(True))
            .execution_options(populate_existing=True)
        )
        lapsed = [
            learner
            for learner in result.scalars().all()
            if is_expired(learner.subscription_expiry_date, now)
        ]
        if not lapsed:
            return 0

        async with atomic(self.db):
            for learner in lapsed:
                learner.subscription_active = False

        logger.info("Expired lapsed subscriptions: count=%s", len(lapsed))
        return len(lapsed)

    async def _load_alumnus(self, learner_id: UUID) -> Learner:
        learner = await load_learner(self.db, learner_id)
        if learner.kind != LearnerKind.ALUMNI.value:
            raise LearnerNotFoundError(
                f"Alumni {learner_id} not found",
                {"learner_id": str(learner_id), "kind": LearnerKind.ALUMNI.value},
            )
        return learner


def to_payment_response(payment: SubscriptionPayment) -> SubscriptionPaymentResponse:
    return SubscriptionPaymentResponse(
        id=payment.id,
        years=payment.years,
        amount=payment.amount,
        payment_date=ensure_utc(payment.payment_date),
        expiry_date=ensure_utc(payment.expiry_date),
        payment_method=SubscriptionPaymentMethod(payment.payment_method),
        transaction_id=payment.transaction_id,
        phone=payment.phone,
        status=SubscriptionPaymentStatus(payment.status),
    )
