from coinledger.services.transaction_service import TransactionService, ledger_lock_name
from coinledger.services.task_service import TaskService, TaskServiceError, TaskClaimError
from coinledger.services.streak_service import StreakService, StreakUpdate, weekly_bonus_due
from coinledger.services.notification_service import NotificationService
from coinledger.services.subscription_service import SubscriptionService, SubscriptionError, PurchaseResult
from coinledger.services.ledger_service import (
    CoinLedgerService,
    LedgerState,
    ProgressResult,
    ClaimResult,
    RewardEvent,
)
from coinledger.services.task_seeder import DEFAULT_DAILY_TASKS, ensure_default_tasks, seed_default_tasks

__all__ = [
    "TransactionService",
    "ledger_lock_name",
    "TaskService",
    "TaskServiceError",
    "TaskClaimError",
    "StreakService",
    "StreakUpdate",
    "weekly_bonus_due",
    "NotificationService",
    "SubscriptionService",
    "SubscriptionError",
    "PurchaseResult",
    "CoinLedgerService",
    "LedgerState",
    "ProgressResult",
    "ClaimResult",
    "RewardEvent",
    "DEFAULT_DAILY_TASKS",
    "ensure_default_tasks",
    "seed_default_tasks",
]
