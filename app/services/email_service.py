"""Email notification service using SendGrid."""

import asyncio
import html
import logging
from typing import Optional
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Email service for sending booking alerts to administrators."""

    def __init__(self):
        """Initialize email service."""
        self.api_key = settings.SENDGRID_API_KEY
        self.from_email = settings.SENDGRID_FROM_EMAIL
        self.from_name = settings.SENDGRID_FROM_NAME

        if not self.api_key:
            logger.warning("SENDGRID_API_KEY not configured. Emails will not be sent.")
            self.enabled = False
        else:
            self.client = SendGridAPIClient(self.api_key)
            self.enabled = True
            logger.info("Email service initialized successfully")

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        plain_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            html_body: HTML body content
            plain_body: Plain text body (optional)

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.info("Email service disabled. Would have sent to %s: %s", to, subject)
            return False

        try:
            message = Mail(
                from_email=(self.from_email, self.from_name),
                to_emails=to,
                subject=subject,
                html_content=html_body,
            )

            if plain_body:
                message.plain_text_content = plain_body

            response = await asyncio.to_thread(self.client.send, message)

            if 200 <= response.status_code < 300:
                logger.info("Email sent successfully to %s: %s", to, subject)
                return True
            logger.error("Failed to send email to %s: %s %s", to, response.status_code, response.body)
            return False

        except Exception as e:
            logger.error("Error sending email to %s: %s", to, e)
            return False

    async def send_booking_alert(self, recipients: list[str], subject: str, lines: list[str]) -> int:
        """
        Send the same booking alert to every admin address.

        Returns:
            Number of emails accepted by SendGrid
        """
        html_body = "<html><body style=\"font-family: Arial, sans-serif;\">"
        html_body += "".join(f"<p>{line}</p>" for line in lines)
        html_body += "</body></html>"
        plain_body = "\n".join(html.unescape(line) for line in lines)

        sent = 0
        for address in recipients:
            if await self.send_email(address, subject, html_body, plain_body):
                sent += 1
        return sent


email_service = EmailService()
