"""Tests for the ticket responded email and its Celery task."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from helpdesk.notifications.email_service import ConsoleEmailService, get_email_service
from helpdesk.notifications.email_templates import build_ticket_responded_email
from helpdesk.tickets.tasks import send_ticket_responded_notification

FIELDS = {
    "to": "guest@example.com",
    "name": "Grace <Guest>",
    "title": "Cannot log in",
    "ticket_number": "300400",
    "content": "Please reset your password <here>.",
    "url": "https://support.example.com/check-ticket/300400/guest@example.com",
}


class TestBuildTicketRespondedEmail:
    def test_fields(self):
        message = build_ticket_responded_email(**FIELDS)

        assert message.to == "guest@example.com"
        assert message.subject == "Ticket #300400 responded: Cannot log in"
        assert FIELDS["url"] in message.body_text
        assert FIELDS["content"] in message.body_text

    def test_html_is_escaped(self):
        message = build_ticket_responded_email(**FIELDS)

        assert "Grace &lt;Guest&gt;" in message.body_html
        assert "reset your password &lt;here&gt;." in message.body_html
        assert 'href="https://support.example.com/check-ticket/300400/guest@example.com"' in (
            message.body_html
        )


class TestEmailServiceSelection:
    def test_console_backend(self):
        assert isinstance(get_email_service(), ConsoleEmailService)


class TestSendTicketRespondedNotification:
    @pytest.fixture
    def email_service(self):
        service = MagicMock()
        service.send_email = AsyncMock(return_value=True)
        with patch("helpdesk.tickets.tasks.get_email_service", return_value=service):
            yield service

    def test_sends_email(self, email_service):
        result = send_ticket_responded_notification.apply(kwargs=FIELDS)

        assert result.get() == {"status": "sent"}
        message = email_service.send_email.await_args.args[0]
        assert message.to == "guest@example.com"
        assert "300400" in message.subject

    def test_gives_up_after_last_retry(self, email_service):
        email_service.send_email.return_value = False

        result = send_ticket_responded_notification.apply(kwargs=FIELDS, retries=2)

        assert result.get()["status"] == "failed"
