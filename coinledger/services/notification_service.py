"""
Service for reward notifications.

Handles:
- Recording a toast for every reward event (task claim, streak, weekly bonus, premium)
- Listing a user's notifications and marking them read

Notifications are fire-and-forget: they are written after the ledger change
has committed, and a failure here is logged and never reaches the caller.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.models.notification import Notification

logger = logging.getLogger(__name__)

MAX_NOTIFICATION_LIMIT = 100


class NotificationService:
    """Service for recording and reading reward notifications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def notify(
        self,
        user_id: UUID,
        notification_type: str,
        title: str,
        description: Optional[str] = None,
    ) -> Optional[Notification]:
        """Record a notification and commit it.

        The write goes through its own session on the same engine, so a
        failure here never rolls back or expires objects in the caller's session.

        Returns:
            The stored notification, or None if it could not be written.
        """
        notification = Notification(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            description=description,
        )
        try:
            async with AsyncSession(self.db.bind, expire_on_commit=False) as session:
                session.add(notification)
                await session.commit()
        except Exception:
            logger.exception(f"Failed to record {notification_type} notification for {user_id=}")
            return None

        logger.info(f"Notification for {user_id=}: {title} - {description}")
        return notification

    async def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 50,
    ) -> List[Notification]:
        """Newest notifications first."""
        limit = max(1, min(limit, MAX_NOTIFICATION_LIMIT))
        conditions = [Notification.user_id == user_id]
        if unread_only:
            conditions.append(Notification.is_read.is_(False))

        result = await self.db.execute(
            select(Notification)
            .where(and_(*conditions))
            .order_by(desc(Notification.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Notification)
            .where(and_(Notification.user_id == user_id, Notification.is_read.is_(False)))
        )
        return result.scalar_one()

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Optional[Notification]:
        """Mark one of the user's notifications as read.

        Returns:
            The notification, or None if the user has no such notification.
        """
        result = await self.db.execute(
            select(Notification).where(
                and_(
                    Notification.notification_id == notification_id,
                    Notification.user_id == user_id,
                )
            )
        )
        notification = result.scalar_one_or_none()
        if not notification:
            return None

        if not notification.is_read:
            notification.is_read = True
            await self.db.commit()
        return notification
