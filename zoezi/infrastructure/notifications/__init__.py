# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lifecycle notifications.

Example:
    from zoezi.infrastructure.notifications import create_notification_service

    notifier = create_notification_service(settings)
    await notifier.notify("graduated", learner.email, params)
"""

from zoezi.infrastructure.notifications.service import (
    TEMPLATES,
    NotificationService,
    create_notification_service,
)

__all__ = [
    "TEMPLATES",
    "NotificationService",
    "create_notification_service",
]
