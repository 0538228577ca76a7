# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment-gateway transaction ledger model."""

from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from zoezi.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class PaymentTransaction(IdMixin, TimestampMixin, Base):
    """A confirmed mobile-money transaction and what it was used for."""

    __tablename__ = "payment_transactions"

    transaction_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(30))
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    purpose: Mapped[str | None] = mapped_column(String(30))
    purpose_meta: Mapped[dict[str, Any] | None] = mapped_column(JSON)
