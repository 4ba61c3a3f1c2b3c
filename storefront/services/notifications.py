"""
Notification Adapter

Sends transactional email through SendGrid.
"""

import asyncio
from typing import Protocol

import structlog
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from storefront.config import get_settings
from storefront.errors import NotificationError

logger = structlog.get_logger(__name__)


class Mailer(Protocol):
    async def send(self, to: str, subject: str, html: str) -> None:
        ...


class SendGridMailer:
    """Email delivery through the SendGrid v3 API."""

    def __init__(self, api_key: str, sender: str):
        self.client = SendGridAPIClient(api_key)
        self.sender = sender

    async def send(self, to: str, subject: str, html: str) -> None:
        message = Mail(
            from_email=self.sender,
            to_emails=to,
            subject=subject,
            html_content=html,
        )
        try:
            response = await asyncio.to_thread(self.client.send, message)
        except HTTPError as e:
            logger.error("Email delivery failed", status_code=e.status_code, recipient=to)
            raise NotificationError(f"SendGrid rejected message: {e.status_code}")

        logger.info("Email sent", recipient=to, status_code=response.status_code)


def get_mailer() -> Mailer:
    """FastAPI dependency returning the configured mailer."""
    mail = get_settings().mail
    return SendGridMailer(mail.sendgrid_api_key.get_secret_value(), mail.sender)
