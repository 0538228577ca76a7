# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment ledger service for gateway transactions.

Confirmed mobile-money transactions are recorded once and later marked as
used by the purchase they paid for. The ledger does not talk to the
gateway; a recorded transaction id is trusted.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.domains.errors import TransactionNotFoundError
from zoezi.infrastructure.database.connection import atomic
from zoezi.infrastructure.database.models import PaymentTransaction
from zoezi.models.common import TransactionPurpose
from zoezi.models.payment import TransactionResponse
from zoezi.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for the payment-gateway transaction ledger.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record_transaction(
        self,
        transaction_id: str,
        phone: str | None = None,
        amount: Decimal | None = None,
    ) -> TransactionResponse:
        """Store a confirmed transaction.

        Recording the same transaction id twice returns the stored record.

        Args:
            transaction_id: Gateway receipt number.
            phone: Paying phone number.
            amount: Amount paid.

        Returns:
            The ledger entry.
        """
        existing = await self._find(transaction_id)
        if existing is not None:
            return self._to_response(existing)

        transaction = PaymentTransaction(
            transaction_id=transaction_id,
            phone=phone,
            amount=amount,
        )

        async with atomic(self.db):
            self.db.add(transaction)

        logger.info("Recorded payment transaction: %s", transaction_id)
        return self._to_response(transaction)

    async def get_transaction(self, transaction_id: str) -> TransactionResponse:
        """Get a ledger entry.

        Raises:
            TransactionNotFoundError: If the transaction is not recorded.
        """
        transaction = await self._find(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(
                f"Transaction {transaction_id} not found",
                {"transaction_id": transaction_id},
            )
        return self._to_response(transaction)

    async def mark_used(
        self,
        transaction_id: str,
        purpose: TransactionPurpose,
        meta: dict[str, Any] | None = None,
    ) -> bool:
        """Mark a transaction as consumed by a purchase.

        Runs inside the caller's unit of work and does not commit.

        Args:
            transaction_id: Gateway receipt number.
            purpose: What the payment was used for.
            meta: Identifiers of the purchase.

        Returns:
            True if the transaction was found and marked, False otherwise.
        """
        transaction = await self._find(transaction_id)
        if transaction is None:
            logger.warning(
                "Payment transaction %s not in ledger; %s proceeds without marking it used",
                transaction_id,
                purpose.value,
            )
            return False

        if transaction.used:
            logger.warning(
                "Payment transaction %s already used for %s, now used for %s",
                transaction_id,
                transaction.purpose,
                purpose.value,
            )

        transaction.used = True
        transaction.purpose = purpose.value
        transaction.purpose_meta = dict(meta or {})
        return True

    async def _find(self, transaction_id: str) -> PaymentTransaction | None:
        result = await self.db.execute(
            select(PaymentTransaction).where(PaymentTransaction.transaction_id == transaction_id)
        )
        return result.scalar_one_or_none()

    def _to_response(self, transaction: PaymentTransaction) -> TransactionResponse:
        return TransactionResponse(
            transaction_id=transaction.transaction_id,
            phone=transaction.phone,
            amount=transaction.amount,
            used=transaction.used,
            purpose=TransactionPurpose(transaction.purpose) if transaction.purpose else None,
            purpose_meta=transaction.purpose_meta,
            created_at=ensure_utc(transaction.created_at),
        )
