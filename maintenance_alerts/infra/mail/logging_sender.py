from __future__ import annotations

import logging

from maintenance_alerts.domain.notifications.models import DeliveryStatus, EmailMessage
from maintenance_alerts.domain.notifications.ports import EmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(EmailSender):
    """Used when no mail provider is configured: writes the message to the log instead."""

    async def send(self, to: str, message: EmailMessage) -> DeliveryStatus:
        logger.info(f"[Email Notification] To: {to}")
        logger.info(f"Subject: {message.subject}")
        logger.debug(f"Body:\n{message.text}")
        return "logged"
