# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment ledger domain package."""

from zoezi.domains.errors import TransactionNotFoundError
from zoezi.domains.payment.service import PaymentService

__all__ = [
    "PaymentService",
    "TransactionNotFoundError",
]
