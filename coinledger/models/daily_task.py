"""Daily task definition model."""
from sqlalchemy import Column, String, Integer, Boolean, DateTime
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class DailyTask(Base):
    """Task template shared by all users."""
    __tablename__ = "daily_tasks"

    task_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    reward_coins = Column(Integer, nullable=False, default=10)
    task_type = Column(String(50), nullable=False, index=True)
    required_count = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    def __repr__(self):
        return f"<DailyTask(task_id={self.task_id}, name={self.name}, type={self.task_type})>"
