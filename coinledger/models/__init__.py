"""Database models."""
from coinledger.models.base import TransactionType, TaskType, NotificationType
from coinledger.models.coin_account import CoinAccount
from coinledger.models.transaction import CoinTransaction
from coinledger.models.daily_task import DailyTask
from coinledger.models.task_progress import TaskProgress
from coinledger.models.streak import UserStreak
from coinledger.models.subscription import UserSubscription
from coinledger.models.notification import Notification

__all__ = [
    "TransactionType",
    "TaskType",
    "NotificationType",
    "CoinAccount",
    "CoinTransaction",
    "DailyTask",
    "TaskProgress",
    "UserStreak",
    "UserSubscription",
    "Notification",
]
