"""Daily task catalogue and per-day progress tracking."""

import logging
import uuid
from datetime import date, datetime, UTC
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.models.daily_task import DailyTask
from coinledger.models.task_progress import TaskProgress
from coinledger.utils.db_helpers import insert_if_absent

logger = logging.getLogger(__name__)


class TaskServiceError(RuntimeError):
    """Base exception for task service errors."""


class TaskClaimError(TaskServiceError):
    """Raised when a task reward cannot be claimed.

    ``reason`` is one of ``not_found``, ``not_completed`` or ``already_claimed``.
    """

    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


class TaskService:
    """Service for daily task definitions and user progress rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active_tasks(self) -> List[DailyTask]:
        """All active task definitions in display order."""
        result = await self.db.execute(
            select(DailyTask)
            .where(DailyTask.is_active.is_(True))
            .order_by(DailyTask.created_at, DailyTask.name)
        )
        return list(result.scalars().all())

    async def get_active_tasks_by_type(self, task_type: str) -> List[DailyTask]:
        result = await self.db.execute(
            select(DailyTask).where(
                and_(DailyTask.task_type == task_type, DailyTask.is_active.is_(True))
            )
        )
        return list(result.scalars().all())

    async def get_task(self, task_id: UUID) -> Optional[DailyTask]:
        """Active task by id; deactivated tasks can no longer be claimed."""
        result = await self.db.execute(
            select(DailyTask).where(and_(DailyTask.task_id == task_id, DailyTask.is_active.is_(True)))
        )
        return result.scalar_one_or_none()

    async def get_progress_for_day(self, user_id: UUID, day: date) -> Dict[UUID, TaskProgress]:
        """Progress rows for one user and day keyed by task_id.

        Tasks with no row have made no progress that day.
        """
        result = await self.db.execute(
            select(TaskProgress)
            .where(and_(TaskProgress.user_id == user_id, TaskProgress.reset_date == day))
            .execution_options(populate_existing=True)
        )
        return {progress.task_id: progress for progress in result.scalars().all()}

    async def get_progress(self, user_id: UUID, task_id: UUID, day: date) -> Optional[TaskProgress]:
        result = await self.db.execute(
            select(TaskProgress)
            .where(
                and_(
                    TaskProgress.user_id == user_id,
                    TaskProgress.task_id == task_id,
                    TaskProgress.reset_date == day,
                )
            )
            .execution_options(populate_existing=True)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_or_create_progress(self, user_id: UUID, task_id: UUID, day: date) -> TaskProgress:
        """Return today's progress row for the task, creating an empty one if needed."""
        progress = await self.get_progress(user_id, task_id, day)
        if progress:
            return progress

        await insert_if_absent(
            self.db,
            TaskProgress,
            ["user_id", "task_id", "reset_date"],
            progress_id=uuid.uuid4(),
            user_id=user_id,
            task_id=task_id,
            reset_date=day,
            current_count=0,
            is_completed=False,
            is_claimed=False,
        )

        progress = await self.get_progress(user_id, task_id, day)
        if not progress:
            raise TaskServiceError(f"Progress row missing after create for {user_id=} {task_id=} {day}")
        return progress

    def apply_increment(self, task: DailyTask, progress: TaskProgress, increment: int) -> bool:
        """Advance a progress row.

        Claimed rows are left alone. Completion is derived from the count, and
        once reached it stays reached because increments are positive.

        Returns:
            True if this increment moved the row from incomplete to complete.
        """
        if increment < 1:
            raise ValueError(f"increment must be positive, got {increment}")

        if progress.is_claimed:
            return False

        was_completed = progress.is_completed
        progress.current_count += increment
        progress.is_completed = progress.current_count >= task.required_count

        if progress.is_completed and not was_completed:
            progress.completed_at = datetime.now(UTC)
            logger.info(f"Daily task {task.name} completed for {progress.user_id=} on {progress.reset_date}")
            return True
        return False

    def mark_claimed(self, progress: TaskProgress) -> None:
        """Flag a completed row as claimed.

        Raises:
            TaskClaimError: If the row is not completed or was already claimed.
        """
        if not progress.is_completed:
            raise TaskClaimError("not_completed", "Task is not completed")
        if progress.is_claimed:
            raise TaskClaimError("already_claimed", "Task reward already claimed")

        progress.is_claimed = True
        progress.claimed_at = datetime.now(UTC)

    async def all_tasks_finished(self, user_id: UUID, day: date) -> bool:
        """True when at least one task is active and every active task is completed and claimed on ``day``."""
        tasks = await self.get_active_tasks()
        if not tasks:
            return False

        progress_by_task = await self.get_progress_for_day(user_id, day)
        for task in tasks:
            progress = progress_by_task.get(task.task_id)
            if progress is None or not (progress.is_completed and progress.is_claimed):
                return False
        return True
