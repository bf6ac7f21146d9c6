"""Reward notification model.

Stores the toast shown to a user for every reward event (task claim, streak
increment, weekly bonus, premium purchase).
"""
from sqlalchemy import Column, String, Boolean, DateTime, Index
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class Notification(Base):
    """Reward notification record."""
    __tablename__ = "notifications"

    notification_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, index=True)
    notification_type = Column(String(50), nullable=False)
    title = Column(String(120), nullable=False)
    description = Column(String(255), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (f"<Notification(id={self.notification_id}, type={self.notification_type}, "
                f"user={self.user_id})>")
