"""
Email notifications through the Brevo transactional email API.

Every recipient gets its own delivery attempt: one failed send is logged and
reported in the outcome list, it never stops the others or reaches the caller.
"""

import base64
import asyncio
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from scholarship_portal.core.config import Settings, mask_secret
from scholarship_portal.core.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailAttachment(BaseModel):
    filename: str
    content: bytes


class Notification(BaseModel):
    label: str = Field(..., description="Who the notification is for, used in logs (applicant, operations)")
    to: Optional[str] = None
    subject: str
    html: str
    attachments: List[EmailAttachment] = Field(default_factory=list)


class NotificationOutcome(BaseModel):
    label: str
    recipient: Optional[str] = None
    sent: bool = False
    message_id: Optional[str] = None
    error: Optional[str] = None


class NotificationService:
    """Service for sending HTML emails with attachments via Brevo."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.BREVO_API_KEY
        self.api_url = settings.BREVO_API_URL
        self.sender_email = settings.EMAIL_FROM
        self.sender_name = f"{settings.PORTAL_NAME} Portal"
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS
        self._transport = transport

        if self.api_key:
            logger.info(f"Brevo email service initialized (key: {mask_secret(self.api_key)})")
        else:
            logger.warning("BREVO_API_KEY not configured - notification emails will be skipped")

    def _build_payload(self, to: str, subject: str, html: str, attachments: List[EmailAttachment]) -> dict:
        payload = {
            "sender": {"email": self.sender_email, "name": self.sender_name},
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html,
        }
        if attachments:
            payload["attachment"] = [
                {"name": att.filename, "content": base64.b64encode(att.content).decode("ascii")}
                for att in attachments
            ]
        return payload

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        attachments: Optional[List[EmailAttachment]] = None
    ) -> Optional[str]:
        """
        Send one email.

        Returns:
            str: Brevo message id, or None when sending is not configured

        Raises:
            NotificationError: If Brevo rejects the message or cannot be reached
        """
        if not self.api_key:
            logger.warning(f"Brevo API key missing - skipping email to {to}: {subject}")
            return None

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "api-key": self.api_key
        }
        payload = self._build_payload(to, subject, html, attachments or [])

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error sending email to {to}: {str(e)}")
            raise NotificationError(f"Failed to reach Brevo: {str(e)}") from e

        try:
            response_data = response.json()
        except ValueError:
            response_data = {}

        if response.is_success:
            message_id = response_data.get("messageId")
            logger.info(f"Email sent to {to}: {message_id}")
            return message_id

        error_message = response_data.get("message") or response.reason_phrase
        logger.error(f"Brevo API error for {to}: HTTP {response.status_code} - {error_message}")
        raise NotificationError(f"Brevo API error: {error_message}")

    async def _deliver(self, notification: Notification) -> NotificationOutcome:
        outcome = NotificationOutcome(label=notification.label, recipient=notification.to)
        if not notification.to:
            logger.warning(f"No recipient address for {notification.label} notification - skipping")
            outcome.error = "missing recipient"
            return outcome

        try:
            outcome.message_id = await self.send_email(
                notification.to,
                notification.subject,
                notification.html,
                notification.attachments
            )
            if self.api_key:
                outcome.sent = True
            else:
                outcome.error = "email not configured"
        except Exception as e:
            logger.error(f"Failed to send {notification.label} email to {notification.to}: {e}")
            outcome.error = str(e)
        return outcome

    async def dispatch(self, notifications: List[Notification]) -> List[NotificationOutcome]:
        """Send all notifications concurrently; failures are isolated per recipient."""
        outcomes = await asyncio.gather(*(self._deliver(n) for n in notifications))
        sent = sum(1 for o in outcomes if o.sent)
        logger.info(f"Dispatched {len(outcomes)} notifications ({sent} sent)")
        return list(outcomes)
