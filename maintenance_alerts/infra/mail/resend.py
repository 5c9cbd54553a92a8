from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from maintenance_alerts.domain.common.errors import DeliveryError, delivery_error
from maintenance_alerts.domain.notifications.models import DeliveryStatus, EmailMessage
from maintenance_alerts.domain.notifications.ports import EmailSender

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailSender(EmailSender):
    """
    Sends through the Resend HTTP API.

    Pass a shared aiohttp session to reuse connections across a run; without one
    a short-lived session is opened per message.
    """

    def __init__(
        self,
        api_key: str,
        mail_from: str,
        session: Optional[aiohttp.ClientSession] = None,
        api_url: str = RESEND_API_URL,
        timeout_seconds: float = 15.0,
    ) -> None:
        self._api_key = api_key
        self._from = mail_from
        self._session = session
        self._api_url = api_url
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def send(self, to: str, message: EmailMessage) -> DeliveryStatus:
        payload = {
            "from": self._from,
            "to": [to],
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            if self._session is not None:
                status, body = await self._post(self._session, payload, headers)
            else:
                async with aiohttp.ClientSession(timeout=self._timeout) as session:
                    status, body = await self._post(session, payload, headers)
        except aiohttp.ClientError as e:
            raise DeliveryError(f"could not reach mail provider: {e}", cause=e) from e
        except asyncio.TimeoutError as e:
            raise DeliveryError("mail provider timed out", cause=e) from e

        if not 200 <= status < 300:
            raise delivery_error(status, body)

        logger.info(f"Email sent to {to}: {message.subject}")
        return "sent"

    async def _post(self, session, payload: dict, headers: dict) -> tuple[int, str]:
        async with session.post(self._api_url, json=payload, headers=headers) as resp:
            return resp.status, await resp.text()
