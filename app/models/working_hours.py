"""Global working-hours policy (single row, id=1)."""

from sqlalchemy import Column, Integer, DateTime, CheckConstraint
from app.core.database import Base
from app.utils.timeutils import utcnow

POLICY_ROW_ID = 1


class WorkingHours(Base):
    __tablename__ = "working_hours"

    id = Column(Integer, primary_key=True, default=POLICY_ROW_ID)
    start_hour = Column(Integer, nullable=False, default=9)
    end_hour = Column(Integer, nullable=False, default=18)
    slot_duration_minutes = Column(Integer, nullable=False, default=30)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("start_hour >= 0 AND start_hour < end_hour AND end_hour <= 24", name="ck_working_hours_range"),
    )
