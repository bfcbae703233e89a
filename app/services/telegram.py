"""Telegram Bot API client for booking alerts."""

import logging
import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram_message(
    bot_token: str,
    chat_id: str,
    text: str,
    timeout_seconds: float = 20.0,
) -> bool:
    """Send an HTML-formatted message. Returns True when Telegram reports ok."""
    if not bot_token or not chat_id or not text:
        return False

    payload = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(TELEGRAM_API_URL.format(token=bot_token), json=payload)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Telegram sendMessage to %s failed: %s", chat_id, e)
        return False

    if not data.get("ok", False):
        logger.error("Telegram API error for chat %s: %s", chat_id, data)
        return False
    return True
