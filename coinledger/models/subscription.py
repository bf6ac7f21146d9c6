"""Premium subscription model."""
from sqlalchemy import Column, Boolean, DateTime
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class UserSubscription(Base):
    """Premium purchase status."""
    __tablename__ = "user_subscriptions"

    subscription_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, unique=True, index=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    purchased_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return f"<UserSubscription(user_id={self.user_id}, is_premium={self.is_premium})>"
