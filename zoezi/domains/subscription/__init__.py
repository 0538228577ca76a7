# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Subscription domain package."""

from zoezi.domains.errors import LearnerNotFoundError
from zoezi.domains.subscription.service import SubscriptionService, to_payment_response

__all__ = [
    "SubscriptionService",
    "to_payment_response",
    "LearnerNotFoundError",
]
