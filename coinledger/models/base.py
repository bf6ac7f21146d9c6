"""Base utilities for SQLAlchemy models."""
from enum import Enum
import uuid
from datetime import datetime, UTC
from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.sql import sqltypes


class TransactionType(str, Enum):
    """Ledger transaction types written by the coin ledger."""
    DAILY_TASK = "daily_task"
    WEEKLY_BONUS = "weekly_bonus"
    PURCHASE = "purchase"


class TaskType(str, Enum):
    """Tags raised by calling pages to advance daily tasks."""
    LOGIN = "login"
    SEND_MESSAGES = "send_messages"
    NEW_CONVERSATION = "new_conversation"
    CREATE_CHARACTER = "create_character"


class NotificationType(str, Enum):
    """Reward events surfaced to the user as toasts."""
    TASK_REWARD = "task_reward"
    COINS_ADDED = "coins_added"
    STREAK = "streak"
    WEEKLY_BONUS = "weekly_bonus"
    PREMIUM = "premium"


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class AdaptiveUUID(sqltypes.TypeDecorator):
    """UUID type: native on PostgreSQL, 32-char hex string elsewhere."""

    impl = sqltypes.String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PGUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    @staticmethod
    def _coerce_uuid(value):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))

    def process_bind_param(self, value, dialect):
        value = self._coerce_uuid(value)
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value
        return value.hex

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self._coerce_uuid(value)


def get_uuid_column(*args, **kwargs):
    """Get a UUID column that adapts to the database dialect at runtime.

    Example:
        progress_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
        task_id = get_uuid_column(ForeignKey("daily_tasks.task_id"), nullable=False)
    """
    return Column(AdaptiveUUID(), *args, **kwargs)
