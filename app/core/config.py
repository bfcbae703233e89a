"""
Application configuration.
Values are read from environment variables / .env file. Notification
channels (Telegram, Twilio, SendGrid) stay silent when their credentials
are empty, so local development works without any of them.
"""
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


def _split_csv(raw: str) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for part in raw.replace(";", ",").replace("\n", ",").split(","):
        item = part.strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            out.append(item)
    return out


# ---------------------------------------------------------------------------
# Pydantic Settings — reads from os.environ / .env
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATABASE_URL: str
    JWT_SECRET_KEY: str = ""

    # Scheduling defaults
    DEFAULT_POST_ID: str = "post_1"
    DEFAULT_START_HOUR: int = 9
    DEFAULT_END_HOUR: int = 18
    DEFAULT_SLOT_DURATION_MINUTES: int = 30

    # Organisation-wide switch for "new booking" admin alerts
    NOTIFICATIONS_ENABLED: bool = True

    # Telegram bot
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_ADMIN_CHAT_IDS: str = ""
    TELEGRAM_NOTIFY_NEW_BOOKING: bool = True
    TELEGRAM_NOTIFY_BOOKING_CONFIRMED: bool = False
    TELEGRAM_NOTIFY_BOOKING_CANCELLED: bool = True

    # Twilio SMS
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # SendGrid Email
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = "noreply@bay-booking.local"
    SENDGRID_FROM_NAME: str = "Bay Booking"
    ADMIN_EMAILS: str = ""

    class Config:
        env_file = ".env"

    @property
    def telegram_admin_chat_ids(self) -> list[str]:
        return _split_csv(self.TELEGRAM_ADMIN_CHAT_IDS)

    @property
    def admin_emails(self) -> list[str]:
        return _split_csv(self.ADMIN_EMAILS)


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. It must be provided as a JWT_SECRET_KEY "
        "environment variable or in the .env file. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
