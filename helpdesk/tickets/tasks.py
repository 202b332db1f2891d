"""Celery tasks for support ticket notifications."""

import asyncio
import logging
from typing import Any

from helpdesk.core.celery_app import celery_app
from helpdesk.notifications.email_service import get_email_service
from helpdesk.notifications.email_templates import build_ticket_responded_email

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


@celery_app.task(bind=True, max_retries=2, default_retry_delay=30)
def send_ticket_responded_notification(
    self: Any,
    to: str,
    name: str,
    title: str,
    ticket_number: str,
    content: str,
    url: str,
) -> dict[str, str]:
    """Email a "ticket responded" notification for an already committed comment."""
    email_msg = build_ticket_responded_email(
        to=to,
        name=name,
        title=title,
        ticket_number=ticket_number,
        content=content,
        url=url,
    )

    try:
        success = asyncio.run(get_email_service().send_email(email_msg))
        if not success:
            raise EmailDeliveryError(f"Email service rejected message to {to}")
    except Exception as exc:
        logger.warning(
            "Ticket %s notification to %s failed (attempt %d): %s",
            ticket_number,
            to,
            self.request.retries + 1,
            exc,
        )
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc) from exc
        logger.error("Giving up on ticket %s notification to %s", ticket_number, to)
        return {"status": "failed", "reason": str(exc)}

    logger.info("Ticket %s notification sent to %s", ticket_number, to)
    return {"status": "sent"}
