"""Consecutive-day streak model."""
from sqlalchemy import Column, Integer, Date, DateTime
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class UserStreak(Base):
    """Days in a row on which a user completed and claimed every active task."""
    __tablename__ = "user_streaks"

    streak_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, unique=True, index=True)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_completed_date = Column(Date, nullable=True)
    weekly_bonus_last_claimed = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return (f"<UserStreak(user_id={self.user_id}, current={self.current_streak}, "
                f"longest={self.longest_streak}, last={self.last_completed_date})>")
