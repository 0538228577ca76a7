# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment-gateway ledger models."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from zoezi.models.common import TransactionPurpose


class TransactionResponse(BaseModel):
    """A payment-gateway ledger entry."""

    transaction_id: str
    phone: str | None = None
    amount: Decimal | None = None
    used: bool
    purpose: TransactionPurpose | None = None
    purpose_meta: dict[str, Any] | None = None
    created_at: datetime
