"""Twilio SMS service.

Sends booking status texts to clients. Without Twilio credentials every
send is skipped and reported as not delivered.
"""

import asyncio
import logging
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from app.core.config import settings

logger = logging.getLogger(__name__)


def _get_twilio_client() -> Client:
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)


async def send_booking_sms(client_phone: str | None, body: str) -> bool:
    """Send a booking update to the client. Returns True on success."""
    if not client_phone:
        logger.debug("No client phone on booking — skipping SMS")
        return False
    return await _send_sms(client_phone, body)


async def _send_sms(to: str, body: str) -> bool:
    """Send an SMS via Twilio. Returns True on success."""
    if not all([settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN, settings.TWILIO_PHONE_NUMBER]):
        logger.warning("Twilio credentials not configured — skipping SMS to %s", to)
        return False

    try:
        client = _get_twilio_client()
        # The Twilio client is synchronous
        message = await asyncio.to_thread(
            client.messages.create,
            body=body,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=to,
        )
        logger.info("SMS sent to %s — SID: %s", to, message.sid)
        return True
    except TwilioRestException as e:
        logger.error("Twilio error sending SMS to %s: %s", to, e)
        return False
    except Exception as e:
        logger.error("Unexpected error sending SMS to %s: %s", to, e)
        return False
