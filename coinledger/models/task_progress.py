"""Per-user, per-day daily task progress model."""
from sqlalchemy import Column, Integer, Boolean, Date, DateTime, ForeignKey, Index, UniqueConstraint
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class TaskProgress(Base):
    """One user's progress on one daily task for one UTC calendar day.

    A new day has no row until the first progress write, which is how
    progress resets.
    """
    __tablename__ = "user_task_progress"

    progress_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, index=True)
    task_id = get_uuid_column(ForeignKey("daily_tasks.task_id", ondelete="CASCADE"), nullable=False)
    current_count = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    is_claimed = Column(Boolean, nullable=False, default=False)
    reset_date = Column(Date, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    claimed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "task_id", "reset_date", name="uq_user_task_progress_day"),
        Index("ix_user_task_progress_user_date", "user_id", "reset_date"),
    )

    def __repr__(self):
        return (f"<TaskProgress(user_id={self.user_id}, task_id={self.task_id}, date={self.reset_date}, "
                f"count={self.current_count}, completed={self.is_completed}, claimed={self.is_claimed})>")
