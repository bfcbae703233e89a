"""User model: clients who book and administrators who run the console."""

from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base
from app.utils.timeutils import utcnow

ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    phone = Column(String, nullable=True, index=True)
    email = Column(String, nullable=True, unique=True, index=True)
    telegram_chat_id = Column(String, nullable=True)
    role = Column(String, nullable=False, default=ROLE_CLIENT)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    notifications = relationship("Notification", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
