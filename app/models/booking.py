"""Booking model.

The service/user terms (name, price, duration) are copied into the booking
when it is created and never re-synced, so historical bookings keep the
terms that applied when they were made.
"""

from dataclasses import dataclass
from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, Index, Enum as SQLEnum, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import composite
import uuid
import enum
from app.core.database import Base
from app.utils.timeutils import utcnow


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ControlStatus(str, enum.Enum):
    """Administrative call-tracking tag, independent of BookingStatus."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CALLBACK = "callback"
    NO_ANSWER = "no_answer"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.IN_PROGRESS: frozenset({
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


@dataclass(frozen=True)
class BookingTerms:
    service_name: str
    user_name: str
    price: int
    duration: int


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    # Plain string: bookings outlive the post they were made on
    post_id = Column(String, nullable=False, index=True)
    employee_id = Column(UUID(as_uuid=True), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    employee_name = Column(String, nullable=True)

    # Snapshot terms
    service_name = Column(String, nullable=False)
    user_name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    terms = composite(BookingTerms, service_name, user_name, price, duration)

    date_time = Column(DateTime, nullable=False, index=True)  # slot start, naive UTC
    status = Column(
        SQLEnum(BookingStatus, name="booking_status", values_callable=_enum_values),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    in_progress_started_at = Column(DateTime, nullable=True)

    control_status = Column(
        SQLEnum(ControlStatus, name="booking_control_status", values_callable=_enum_values),
        nullable=False,
        default=ControlStatus.PENDING,
    )
    control_comment = Column(Text, nullable=True)
    control_updated_at = Column(DateTime, nullable=True)

    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    rating_comment = Column(Text, nullable=True)

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        # At most one live booking per (post, slot start)
        Index(
            "uq_bookings_live_slot",
            "post_id",
            "date_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )
