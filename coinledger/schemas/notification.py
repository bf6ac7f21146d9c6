"""Schemas for reward notification API responses."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from coinledger.schemas.base import BaseSchema


class NotificationResponse(BaseSchema):
    """Reward toast shown to the user."""

    notification_id: UUID
    notification_type: str  # task_reward, coins_added, streak, weekly_bonus, premium
    title: str
    description: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseSchema):
    notifications: list[NotificationResponse]
    unread_count: int
