"""Date/time helpers for slot generation.

All wall-clock values are timezone-naive and interpreted as UTC. Instants
are stored as naive UTC datetimes and rendered as ``YYYY-MM-DDTHH:MM:SSZ``.
"""

import re
from datetime import date, datetime, time, timedelta, timezone

from app.core.errors import ValidationError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60

# Slot queries look one day ahead, so the calendar's last day is unusable
LAST_DAY = date.max - timedelta(days=1)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD``."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValidationError("Invalid date format. Expected: YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid calendar date: {value}")
    if parsed > LAST_DAY:
        raise ValidationError(f"Date out of range: {value}")
    return parsed


def hhmm_to_minutes(value: str, allow_end_of_day: bool = False) -> int:
    """Convert ``H:MM``/``HH:MM`` to minutes since midnight.

    ``24:00`` is only accepted when ``allow_end_of_day`` is set (closing time).
    """
    match = _HHMM_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Invalid time '{value}'. Expected: HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59:
        raise ValidationError(f"Invalid time '{value}'. Minutes must be 00-59")
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY or (total == MINUTES_PER_DAY and not allow_end_of_day):
        raise ValidationError(f"Invalid time '{value}'. Hours must be 00-23")
    return total


def minutes_to_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_time_of_day(value: str) -> str:
    """Normalize a time-of-day to ``HH:MM``.

    Accepts ``H:MM``, ``HH:MM`` or a full ISO instant (its UTC time-of-day
    is used).
    """
    if isinstance(value, str) and "T" in value:
        return parse_instant(value).strftime("%H:%M")
    return minutes_to_hhmm(hhmm_to_minutes(value))


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 instant into a naive UTC datetime.

    Offsets are converted to UTC; a naive value is taken as UTC already.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Missing date_time")
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid date_time '{value}'. Expected ISO 8601")
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise ValidationError(f"date_time out of range: {value}")
    if parsed.date() > LAST_DAY:
        raise ValidationError(f"date_time out of range: {value}")
    return parsed.replace(microsecond=0)


def format_instant(value: datetime) -> str:
    """Render a naive UTC datetime as ``YYYY-MM-DDTHH:MM:SSZ``."""
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def combine_utc(day: date, minutes: int) -> datetime:
    """The naive UTC instant ``minutes`` after midnight of ``day``."""
    return datetime.combine(day, time(0, 0)) + timedelta(minutes=minutes)


def slot_minutes(start: int, end: int, interval: int) -> list[int]:
    """Slot start offsets from ``start`` in ``interval`` steps, all ``< end``."""
    if interval <= 0:
        raise ValidationError("Slot interval must be positive")
    return list(range(start, end, interval))
