"""Service bay ("post") and its closed-slot overlay."""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timeutils import utcnow

ALLOWED_INTERVALS = (30, 60, 90, 120)


class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True)  # "post_1" is the reserved default
    name = Column(String, nullable=False)
    is_enabled = Column(Boolean, nullable=False, default=True)

    # Only consulted when use_custom_hours is set; otherwise the global policy applies
    use_custom_hours = Column(Boolean, nullable=False, default=False)
    start_time = Column(String, nullable=False, default="09:00")  # HH:MM, UTC
    end_time = Column(String, nullable=False, default="18:00")  # HH:MM, UTC
    interval_minutes = Column(Integer, nullable=False, default=30)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    closed_slots = relationship(
        "PostClosedSlot",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostClosedSlot(Base):
    """A time-of-day that is closed on every calendar day until reopened."""

    __tablename__ = "post_closed_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    time = Column(String, nullable=False)  # HH:MM

    post = relationship("Post", back_populates="closed_slots")

    __table_args__ = (UniqueConstraint("post_id", "time", name="uq_post_closed_slot"),)
