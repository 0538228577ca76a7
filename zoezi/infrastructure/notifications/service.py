# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service for lifecycle e-mails.

Renders one of a fixed set of templates and hands the result to a channel.
Delivery is best-effort: notify() reports problems through the returned
ChannelResult and the log, never by raising, so a failed e-mail can not
undo a committed lifecycle change.
"""

import logging
from typing import Any

from zoezi.core.config.settings import NotificationSettings, Settings
from zoezi.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    EmailChannel,
    NotificationPayload,
)

logger = logging.getLogger(__name__)


# Template name -> (title, message); both are str.format templates
TEMPLATES: dict[str, tuple[str, str]] = {
    "enrollment_confirmed": (
        "Enrollment received: {course_name}",
        "You have been enrolled in {course_name}. Payment status: {payment_status}. "
        "A tutor will be assigned to you shortly.",
    ),
    "tutor_assigned": (
        "Your tutor for {course_name}",
        "{tutor_name} has been assigned as your tutor for {course_name}.",
    ),
    "graduated": (
        "Congratulations on completing {course_name}",
        "You have graduated from {course_name} with a GPA of {gpa} "
        "(final grade: {final_grade}). Certification date: {certification_date}.",
    ),
    "subscription_confirmed": (
        "Alumni subscription confirmed",
        "Your alumni subscription is active until {expiry_date} "
        "({years} year(s) purchased).",
    ),
}


class NotificationService:
    """Best-effort sender for lifecycle notifications.

    Attributes:
        settings: Notification settings.
        channel: Delivery channel.
    """

    def __init__(self, settings: NotificationSettings, channel: BaseChannel) -> None:
        self.settings = settings
        self.channel = channel

    async def notify(
        self,
        template: str,
        recipient_email: str,
        params: dict[str, Any] | None = None,
    ) -> ChannelResult:
        """Render a template and send it.

        Args:
            template: Template name from TEMPLATES.
            recipient_email: Destination address.
            params: Template parameters. ``recipient_name`` is used as the
                greeting when present.

        Returns:
            Result of the delivery attempt.
        """
        params = dict(params or {})

        if not self.settings.enabled:
            return self.channel.create_skipped_result("Notifications disabled")

        try:
            payload = self._render(template, recipient_email, params)
        except (KeyError, IndexError, ValueError) as e:
            logger.warning("Template render error for %s: %s", template, str(e))
            return self.channel.create_failure_result(
                f"Template render error: {str(e)}",
                metadata={"template": template},
            )

        try:
            result = await self.channel.send(payload)
        except Exception as e:
            logger.error(
                "Notification %s to %s failed: %s",
                template,
                recipient_email,
                str(e),
                exc_info=True,
            )
            return self.channel.create_failure_result(
                str(e),
                metadata={"template": template, "recipient": recipient_email},
            )

        if not result.succeeded:
            logger.warning(
                "Notification %s to %s not delivered: %s (%s)",
                template,
                recipient_email,
                result.status.value,
                result.error_message,
            )
        return result

    def _render(
        self,
        template: str,
        recipient_email: str,
        params: dict[str, Any],
    ) -> NotificationPayload:
        """Build a payload from the template table.

        Raises:
            KeyError: If the template or one of its parameters is unknown.
        """
        title_template, message_template = TEMPLATES[template]
        return NotificationPayload(
            template=template,
            title=title_template.format(**params),
            message=message_template.format(**params),
            recipient_email=recipient_email,
            recipient_name=params.get("recipient_name"),
            action_url=self.settings.portal_url,
            action_label="Open the learner portal",
            data=params,
        )


def create_notification_service(settings: Settings) -> NotificationService:
    """Build the notification service with the e-mail channel.

    Args:
        settings: Application settings.

    Returns:
        NotificationService bound to an EmailChannel.
    """
    return NotificationService(settings.notifications, EmailChannel(settings.smtp))
