"""Reward notification endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.database import get_db
from coinledger.dependencies import get_current_user_id
from coinledger.schemas.notification import NotificationListResponse, NotificationResponse
from coinledger.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Newest reward notifications first."""
    service = NotificationService(db)
    notifications = await service.list_notifications(user_id, unread_only=unread_only, limit=limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=await service.count_unread(user_id),
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    notification = await NotificationService(db).mark_read(user_id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(notification)
