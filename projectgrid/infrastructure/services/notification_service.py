"""Outbound email: log-only sender and SendGrid sender (INotificationService).

Both return a bool instead of raising; the account flows treat False as
a hard stop.
"""

from __future__ import annotations

import logging

import httpx

from projectgrid.application.interfaces.services import INotificationService
from projectgrid.core.config import Settings
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.utils.datetime import utc_now

logger = get_logger(__name__)

_SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of sending email.

    Use in development when no mail provider is configured.
    """

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        """Log the notification; no actual email sent."""
        logger.info(
            "Mail: would send to %s (subject=%r)",
            to_address,
            (subject or "")[:80],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Mail body at %s (first 500 chars): %s",
                utc_now().isoformat(),
                (html_body or "")[:500],
            )
        return True


class SendGridNotificationService:
    """Sends HTML email through the SendGrid v3 mail API over httpx.

    Any transport error or non-2xx response is logged and reported as
    False.
    """

    def __init__(
        self,
        api_key: str,
        from_address: str,
        from_name: str = "ProjectGrid",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._from_address = from_address
        self._from_name = from_name
        self._timeout = timeout
        self._http = http_client

    def _payload(self, to_address: str, subject: str, html_body: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": to_address}]}],
            "from": {"email": self._from_address, "name": self._from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            _SENDGRID_API_URL,
            headers={"Authorization": f"Bearer {self._api_key}"},
            json=payload,
            timeout=self._timeout,
        )

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        payload = self._payload(to_address, subject, html_body)
        try:
            if self._http is not None:
                resp = await self._post(self._http, payload)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, payload)
            resp.raise_for_status()
        except httpx.HTTPError:
            logger.warning("Failed to send email (subject=%r)", subject, exc_info=True)
            return False
        logger.info("Mail sent (subject=%r, status=%d)", subject, resp.status_code)
        return True


def build_notification_service(settings: Settings) -> INotificationService:
    """Return the sender selected by MAIL_BACKEND.

    Settings validation guarantees a key when the backend is sendgrid.
    """
    if settings.mail_backend == "sendgrid":
        return SendGridNotificationService(
            api_key=settings.sendgrid_api_key.get_secret_value(),
            from_address=settings.mail_from_address,
            from_name=settings.mail_from_name,
            timeout=settings.mail_timeout_seconds,
        )
    return LogOnlyNotificationService()
