# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for lifecycle notifications and the e-mail channel."""

from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from zoezi.core.config.settings import NotificationSettings, Settings, SMTPSettings
from zoezi.infrastructure.notifications import TEMPLATES, NotificationService, create_notification_service
from zoezi.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    NotificationPayload,
)


class RecordingChannel(BaseChannel):
    """Channel that records payloads instead of delivering them."""

    def __init__(self) -> None:
        super().__init__()
        self.send = AsyncMock(side_effect=self._record)
        self.sent: list[NotificationPayload] = []

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.EMAIL

    async def send(self, payload: NotificationPayload) -> ChannelResult:  # replaced per instance
        return await self._record(payload)

    async def _record(self, payload: NotificationPayload) -> ChannelResult:
        self.sent.append(payload)
        return self.create_success_result(message_id="<test@zoezi>")


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def notifier(channel: RecordingChannel) -> NotificationService:
    return NotificationService(NotificationSettings(enabled=True), channel)


@pytest.fixture
def payload() -> NotificationPayload:
    return NotificationPayload(
        template="graduated",
        title="Congratulations",
        message="You have graduated.",
        recipient_email="learner@example.com",
        recipient_name="Wanjiku Kamau",
        action_url="https://portal.zoezi.ac.ke",
    )


class TestNotificationService:
    """Tests for NotificationService.notify."""

    @pytest.mark.asyncio
    async def test_renders_and_sends(self, notifier, channel) -> None:
        """Test that a known template is rendered and handed to the channel."""
        result = await notifier.notify(
            "tutor_assigned",
            "learner@example.com",
            {"recipient_name": "Wanjiku", "course_name": "Sports Massage", "tutor_name": "Otieno Odhiambo"},
        )

        assert result.succeeded
        assert len(channel.sent) == 1
        sent = channel.sent[0]
        assert sent.title == "Your tutor for Sports Massage"
        assert "Otieno Odhiambo" in sent.message
        assert sent.recipient_name == "Wanjiku"
        assert sent.action_url == "https://portal.zoezi.ac.ke"

    @pytest.mark.asyncio
    async def test_disabled_skips_channel(self, channel) -> None:
        """Test that disabled notifications never reach the channel."""
        notifier = NotificationService(NotificationSettings(enabled=False), channel)

        result = await notifier.notify("graduated", "learner@example.com", {})

        assert result.status == DeliveryStatus.SKIPPED
        channel.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_template_is_a_failure(self, notifier, channel) -> None:
        result = await notifier.notify("no_such_template", "learner@example.com", {})

        assert result.status == DeliveryStatus.FAILED
        channel.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_parameter_is_a_failure(self, notifier, channel) -> None:
        result = await notifier.notify("tutor_assigned", "learner@example.com", {"course_name": "X"})

        assert result.status == DeliveryStatus.FAILED
        assert "Template render error" in result.error_message
        channel.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_channel_exception_is_contained(self, notifier, channel) -> None:
        """Test that a raising channel never propagates out of notify."""
        channel.send.side_effect = RuntimeError("connection reset")

        result = await notifier.notify(
            "subscription_confirmed",
            "alumnus@example.com",
            {"expiry_date": "2027-01-01", "years": 1},
        )

        assert result.status == DeliveryStatus.FAILED
        assert result.error_message == "connection reset"

    def test_every_template_has_title_and_message(self) -> None:
        for title, message in TEMPLATES.values():
            assert title
            assert message

    def test_factory_uses_email_channel(self) -> None:
        service = create_notification_service(Settings())

        assert isinstance(service.channel, EmailChannel)


class TestEmailChannel:
    """Tests for EmailChannel."""

    @pytest.mark.asyncio
    async def test_skips_when_not_configured(self, payload) -> None:
        channel = EmailChannel(SMTPSettings(host=""))

        with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
            result = await channel.send(payload)

        assert result.status == DeliveryStatus.SKIPPED
        send.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_multipart_message(self, payload) -> None:
        channel = EmailChannel(SMTPSettings(host="smtp.example.com"))

        with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
            result = await channel.send(payload)

        assert result.succeeded
        message = send.await_args.args[0]
        assert message["To"] == "learner@example.com"
        assert message["Subject"] == "Congratulations"
        assert send.await_args.kwargs["hostname"] == "smtp.example.com"
        assert result.message_id == message["Message-ID"]

    @pytest.mark.asyncio
    async def test_smtp_error_is_a_failure(self, payload) -> None:
        channel = EmailChannel(SMTPSettings(host="smtp.example.com"))

        with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
            send.side_effect = aiosmtplib.SMTPException("mailbox unavailable")
            result = await channel.send(payload)

        assert result.status == DeliveryStatus.FAILED
        assert "mailbox unavailable" in result.error_message

    def test_html_escapes_content(self, payload) -> None:
        channel = EmailChannel(SMTPSettings(host="smtp.example.com"))
        payload.message = "<script>alert(1)</script>"

        html = channel._build_html(payload)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
