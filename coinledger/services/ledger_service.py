"""Coin & task ledger: the public surface used by chat, character creation,
login and subscription pages.

Every mutating operation holds the user's ledger lock until it commits, so
concurrent calls for one user apply one after another. Operations never
raise: failures are rolled back, logged with the user id and operation, and
reported through an empty or failed result.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.config import get_settings
from coinledger.models.base import NotificationType, TransactionType
from coinledger.models.daily_task import DailyTask
from coinledger.models.task_progress import TaskProgress
from coinledger.models.transaction import CoinTransaction
from coinledger.services.notification_service import NotificationService
from coinledger.services.streak_service import StreakService, StreakUpdate
from coinledger.services.subscription_service import SubscriptionService
from coinledger.services.task_service import TaskClaimError, TaskService
from coinledger.services.transaction_service import TransactionService, ledger_lock_name
from coinledger.utils import lock_client
from coinledger.utils.datetime_helpers import utc_today
from coinledger.utils.lock_client import LockClient

logger = logging.getLogger(__name__)


@dataclass
class RewardEvent:
    """A toast to record once the ledger change has committed."""
    notification_type: str
    title: str
    description: Optional[str] = None


@dataclass
class LedgerState:
    """Snapshot of a user's coins, tasks and streak for one day."""
    user_id: UUID
    day: date
    balance: int = 0
    total_earned: int = 0
    tasks: List[DailyTask] = field(default_factory=list)
    progress: Dict[UUID, TaskProgress] = field(default_factory=dict)
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[date] = None
    weekly_bonus_last_claimed: Optional[date] = None
    is_premium: bool = False
    loaded: bool = False


@dataclass
class ProgressResult:
    task_type: str
    updated_task_ids: List[UUID] = field(default_factory=list)
    completed_task_ids: List[UUID] = field(default_factory=list)
    claimed_task_ids: List[UUID] = field(default_factory=list)
    coins_awarded: int = 0
    streak: Optional[StreakUpdate] = None
    succeeded: bool = True


@dataclass
class ClaimResult:
    task_id: UUID
    success: bool
    reason: Optional[str] = None  # not_found, not_completed, already_claimed or error
    reward_amount: int = 0
    new_balance: Optional[int] = None
    streak: Optional[StreakUpdate] = None


class CoinLedgerService:
    """Coin balance, daily task progress and streak operations for one session."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], date] = utc_today,
        lock: Optional[LockClient] = None,
    ):
        self.db = db
        self.clock = clock
        self.lock = lock or lock_client
        self.settings = get_settings()
        self.transactions = TransactionService(db)
        self.tasks = TaskService(db)
        self.streaks = StreakService(db)

    def _user_lock(self, user_id: UUID):
        return self.lock.lock(
            ledger_lock_name(user_id),
            timeout=self.settings.ledger_lock_timeout_seconds,
            hold_timeout=self.settings.ledger_lock_hold_seconds,
        )

    async def _fail(self, operation: str, user_id: UUID, **context) -> None:
        await self.db.rollback()
        logger.exception(
            f"Ledger operation {operation} failed for {user_id=}",
            extra={"ledger_operation": operation, "user_id": str(user_id), **context},
        )

    async def _notify(self, user_id: UUID, events: List[RewardEvent]) -> None:
        if not events:
            return
        notifications = NotificationService(self.db)
        for event in events:
            await notifications.notify(user_id, event.notification_type, event.title, event.description)

    async def load_state(self, user_id: UUID) -> LedgerState:
        """Load balance, active tasks, today's progress and streak, creating missing rows."""
        today = self.clock()
        try:
            account = await self.transactions.get_or_create_account(user_id)
            streak = await self.streaks.get_or_create_streak(user_id)
            tasks = await self.tasks.get_active_tasks()
            progress = await self.tasks.get_progress_for_day(user_id, today)
            is_premium = await SubscriptionService(self.db).is_premium(user_id)
            await self.db.commit()
        except Exception:
            await self._fail("load_state", user_id)
            return LedgerState(user_id=user_id, day=today)

        return LedgerState(
            user_id=user_id,
            day=today,
            balance=account.balance,
            total_earned=account.total_earned,
            tasks=tasks,
            progress=progress,
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            last_completed_date=streak.last_completed_date,
            weekly_bonus_last_claimed=streak.weekly_bonus_last_claimed,
            is_premium=is_premium,
            loaded=True,
        )

    async def add_coins(
        self,
        user_id: UUID,
        amount: int,
        transaction_type: str,
        description: Optional[str] = None,
    ) -> Optional[CoinTransaction]:
        """Apply a signed amount to the balance and append it to the ledger.

        Returns:
            The transaction, or None if it was rejected or failed.
        """
        try:
            async with self._user_lock(user_id):
                transaction = await self.transactions.create_transaction(
                    user_id, amount, transaction_type, description, auto_commit=False, skip_lock=True,
                )
                await self.db.commit()
        except Exception:
            await self._fail("add_coins", user_id, amount=amount, transaction_type=transaction_type)
            return None

        if amount > 0:
            await self._notify(
                user_id,
                [RewardEvent(NotificationType.COINS_ADDED.value, f"+{amount} Coins!", description)],
            )
        return transaction

    async def update_task_progress(self, user_id: UUID, task_type: str, increment: int = 1) -> ProgressResult:
        """Advance every active task of ``task_type`` for today.

        Tasks that complete in this call are claimed immediately when
        auto-claim is enabled, and the streak is checked afterwards.
        """
        today = self.clock()
        result = ProgressResult(task_type=task_type)
        events: List[RewardEvent] = []
        try:
            async with self._user_lock(user_id):
                tasks = await self.tasks.get_active_tasks_by_type(task_type)
                if not tasks:
                    logger.info(f"No active daily tasks of type {task_type!r}; ignoring progress for {user_id=}")
                    return result

                for task in tasks:
                    progress = await self.tasks.get_or_create_progress(user_id, task.task_id, today)
                    if progress.is_claimed:
                        continue
                    newly_completed = self.tasks.apply_increment(task, progress, increment)
                    result.updated_task_ids.append(task.task_id)
                    if not newly_completed:
                        continue
                    result.completed_task_ids.append(task.task_id)
                    if self.settings.auto_claim_task_rewards:
                        await self._claim(user_id, task, progress, events)
                        result.claimed_task_ids.append(task.task_id)
                        result.coins_awarded += task.reward_coins

                await self.db.flush()
                if result.claimed_task_ids:
                    result.streak = await self._check_streak(user_id, today, events)
                await self.db.commit()
        except Exception:
            await self._fail("update_task_progress", user_id, task_type=task_type, increment=increment)
            return ProgressResult(task_type=task_type, succeeded=False)

        await self._notify(user_id, events)
        return result

    async def claim_task_reward(self, user_id: UUID, task_id: UUID) -> ClaimResult:
        """Claim a completed task by hand. Invalid claims change nothing."""
        today = self.clock()
        events: List[RewardEvent] = []
        try:
            async with self._user_lock(user_id):
                task = await self.tasks.get_task(task_id)
                progress = await self.tasks.get_progress(user_id, task_id, today) if task else None
                if not task or not progress:
                    raise TaskClaimError("not_found", "Task progress not found")

                transaction = await self._claim(user_id, task, progress, events)
                await self.db.flush()
                streak = await self._check_streak(user_id, today, events)
                await self.db.commit()
        except TaskClaimError as exc:
            await self.db.rollback()
            logger.info(f"Claim of {task_id=} by {user_id=} rejected: {exc}")
            return ClaimResult(task_id=task_id, success=False, reason=exc.reason)
        except Exception:
            await self._fail("claim_task_reward", user_id, task_id=str(task_id))
            return ClaimResult(task_id=task_id, success=False, reason="error")

        result = ClaimResult(
            task_id=task_id,
            success=True,
            reward_amount=task.reward_coins,
            new_balance=transaction.balance_after,
            streak=streak,
        )
        await self._notify(user_id, events)
        return result

    async def check_and_update_streak(self, user_id: UUID) -> Optional[StreakUpdate]:
        """Advance the streak if every active task is completed and claimed today."""
        today = self.clock()
        events: List[RewardEvent] = []
        try:
            async with self._user_lock(user_id):
                update = await self._check_streak(user_id, today, events)
                await self.db.commit()
        except Exception:
            await self._fail("check_and_update_streak", user_id)
            return None

        await self._notify(user_id, events)
        return update

    async def _claim(
        self,
        user_id: UUID,
        task: DailyTask,
        progress: TaskProgress,
        events: List[RewardEvent],
    ) -> CoinTransaction:
        self.tasks.mark_claimed(progress)
        description = f"Completed: {task.name}"
        transaction = await self.transactions.create_transaction(
            user_id,
            task.reward_coins,
            TransactionType.DAILY_TASK.value,
            description,
            auto_commit=False,
            skip_lock=True,
        )
        events.append(RewardEvent(NotificationType.TASK_REWARD.value, f"+{task.reward_coins} Coins!", description))
        logger.info(f"Daily task reward claimed: {user_id=}, task={task.name}, reward={task.reward_coins}")
        return transaction

    async def _check_streak(self, user_id: UUID, today: date, events: List[RewardEvent]) -> Optional[StreakUpdate]:
        update = await self.streaks.check_and_update_streak(user_id, today, self.transactions)
        if update is None:
            return None

        events.append(RewardEvent(
            NotificationType.STREAK.value,
            f"{update.current_streak}-day streak!",
            "Every daily task done. Come back tomorrow to keep it going.",
        ))
        if update.bonus_amount:
            events.append(RewardEvent(
                NotificationType.WEEKLY_BONUS.value,
                "Weekly streak bonus",
                f"+{update.bonus_amount} coins for a {update.current_streak}-day streak",
            ))
        return update
