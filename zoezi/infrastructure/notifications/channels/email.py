# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using async SMTP.

Sends plain text and HTML alternatives through aiosmtplib. Configuration
comes from SMTPSettings (``SMTP_*`` environment variables).
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from html import escape

import aiosmtplib

from zoezi.core.config.settings import SMTPSettings
from zoezi.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class EmailChannel(BaseChannel):
    """Email notification channel using async SMTP."""

    def __init__(self, settings: SMTPSettings) -> None:
        """Initialize the email channel.

        Args:
            settings: SMTP connection settings.
        """
        super().__init__()
        self.settings = settings

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.EMAIL

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send email notification via SMTP.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not self.settings.is_configured:
            return self.create_skipped_result("Email channel not configured")

        if not payload.recipient_email:
            return self.create_skipped_result("No recipient email address")

        message = self._build_email_message(payload)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.host,
                port=self.settings.port,
                username=self.settings.username or None,
                password=self.settings.password.get_secret_value() or None,
                start_tls=self.settings.use_tls,
                timeout=self.settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                payload.recipient_email,
                str(e),
                exc_info=True,
            )
            return self.create_failure_result(
                f"SMTP error: {str(e)}",
                metadata={"recipient": payload.recipient_email},
            )

        self.logger.info("Email sent to %s: %s", payload.recipient_email, payload.title)

        return self.create_success_result(
            message_id=message["Message-ID"],
            metadata={"recipient": payload.recipient_email},
        )

    def _build_email_message(self, payload: NotificationPayload) -> MIMEMultipart:
        """Build MIME email message.

        Args:
            payload: Notification payload.

        Returns:
            MIMEMultipart message ready to send.
        """
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.settings.from_name} <{self.settings.from_email}>"
        message["To"] = payload.recipient_email
        message["Subject"] = payload.title
        message["Message-ID"] = make_msgid(domain=self.settings.from_email.partition("@")[2] or None)

        message.attach(MIMEText(self._build_plain_text(payload), "plain", "utf-8"))
        message.attach(MIMEText(self._build_html(payload), "html", "utf-8"))

        return message

    def _build_plain_text(self, payload: NotificationPayload) -> str:
        lines = []
        if payload.recipient_name:
            lines.extend([f"Dear {payload.recipient_name},", ""])

        lines.extend([payload.message, ""])

        if payload.action_url:
            lines.extend([f"{payload.action_label or 'Open portal'}: {payload.action_url}", ""])

        lines.extend(["---", f"{self.settings.from_name}"])
        return "\n".join(lines)

    def _build_html(self, payload: NotificationPayload) -> str:
        greeting = ""
        if payload.recipient_name:
            greeting = f"<p>Dear {escape(payload.recipient_name)},</p>"

        action = ""
        if payload.action_url:
            label = escape(payload.action_label or "Open portal")
            action = f'<p><a href="{escape(payload.action_url, quote=True)}">{label}</a></p>'

        body = escape(payload.message).replace("\n", "<br>")

        return (
            "<!DOCTYPE html>"
            '<html><head><meta charset="utf-8"></head>'
            '<body style="font-family: Arial, sans-serif; color: #1F2937;">'
            f"<h2>{escape(payload.title)}</h2>"
            f"{greeting}<p>{body}</p>{action}"
            f'<p style="font-size: 12px; color: #9CA3AF;">{escape(self.settings.from_name)}</p>'
            "</body></html>"
        )
