"""Consecutive-day streak tracking and the weekly streak bonus."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.config import get_settings
from coinledger.models.base import TransactionType
from coinledger.models.streak import UserStreak
from coinledger.services.task_service import TaskService
from coinledger.services.transaction_service import TransactionService
from coinledger.utils.datetime_helpers import is_previous_day, streak_window_start
from coinledger.utils.db_helpers import insert_if_absent

logger = logging.getLogger(__name__)


@dataclass
class StreakUpdate:
    """Outcome of a streak check that advanced the streak."""
    previous_streak: int
    current_streak: int
    longest_streak: int
    last_completed_date: date
    bonus_amount: int = 0


def weekly_bonus_due(
    new_streak: int,
    last_claimed: Optional[date],
    today: date,
    interval_days: int = 7,
) -> bool:
    """
    Whether reaching ``new_streak`` today earns the weekly bonus.

    The bonus is due on every multiple of ``interval_days`` unless it was
    already paid inside the window that today closes.

    Example:
        >>> weekly_bonus_due(7, None, date(2025, 1, 7))
        True
        >>> weekly_bonus_due(7, date(2025, 1, 7), date(2025, 1, 7))
        False
        >>> weekly_bonus_due(6, None, date(2025, 1, 6))
        False
    """
    if new_streak < 1 or new_streak % interval_days != 0:
        return False
    if last_claimed is None:
        return True
    return last_claimed < streak_window_start(today, new_streak, interval_days)


class StreakService:
    """Service for user streak rows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def get_streak(self, user_id: UUID, for_update: bool = False) -> Optional[UserStreak]:
        stmt = (
            select(UserStreak)
            .where(UserStreak.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_streak(self, user_id: UUID, for_update: bool = False) -> UserStreak:
        """Return the user's streak row, creating a zeroed one if needed."""
        streak = await self.get_streak(user_id, for_update=for_update)
        if streak:
            return streak

        inserted = await insert_if_absent(
            self.db,
            UserStreak,
            ["user_id"],
            streak_id=uuid.uuid4(),
            user_id=user_id,
            current_streak=0,
            longest_streak=0,
        )
        if inserted:
            logger.info(f"Created streak record for {user_id=}")

        streak = await self.get_streak(user_id, for_update=for_update)
        if not streak:
            raise RuntimeError(f"Streak record missing after create for {user_id}")
        return streak

    async def check_and_update_streak(
        self,
        user_id: UUID,
        today: date,
        transaction_service: TransactionService,
    ) -> Optional[StreakUpdate]:
        """
        Advance the streak if every active task is completed and claimed today.

        Counts at most once per day. A gap of more than one day restarts the
        streak at 1. Pays the weekly bonus through ``transaction_service``
        without committing; the caller owns the transaction and the ledger lock.

        Returns:
            The update applied, or None when nothing changed.
        """
        task_service = TaskService(self.db)
        if not await task_service.all_tasks_finished(user_id, today):
            return None

        streak = await self.get_or_create_streak(user_id, for_update=True)
        if streak.last_completed_date == today:
            return None

        previous_streak = streak.current_streak
        if is_previous_day(streak.last_completed_date, today):
            new_streak = previous_streak + 1
        else:
            new_streak = 1

        streak.current_streak = new_streak
        streak.longest_streak = max(streak.longest_streak, new_streak)
        streak.last_completed_date = today

        update = StreakUpdate(
            previous_streak=previous_streak,
            current_streak=new_streak,
            longest_streak=streak.longest_streak,
            last_completed_date=today,
        )

        interval = self.settings.streak_bonus_interval_days
        if weekly_bonus_due(new_streak, streak.weekly_bonus_last_claimed, today, interval):
            amount = self.settings.weekly_bonus_amount
            await transaction_service.create_transaction(
                user_id,
                amount,
                TransactionType.WEEKLY_BONUS.value,
                f"{new_streak}-day streak bonus",
                auto_commit=False,
                skip_lock=True,
            )
            streak.weekly_bonus_last_claimed = today
            update.bonus_amount = amount
            logger.info(f"Weekly streak bonus of {amount} paid to {user_id=} at streak {new_streak}")

        await self.db.flush()

        logger.info(
            f"Streak updated for {user_id=}: {previous_streak} -> {new_streak} "
            f"(longest={streak.longest_streak})"
        )
        return update
