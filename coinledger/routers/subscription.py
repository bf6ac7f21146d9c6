"""Premium subscription endpoints."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.config import get_settings
from coinledger.database import get_db
from coinledger.dependencies import get_current_user_id
from coinledger.schemas.subscription import PurchasePremiumResponse, SubscriptionResponse
from coinledger.services.subscription_service import SubscriptionError, SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()

PURCHASE_FAILURE_STATUS = {
    "already_premium": 409,
    "insufficient_balance": 400,
}


@router.get("", response_model=SubscriptionResponse)
async def get_subscription(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    subscription = await SubscriptionService(db).get_subscription(user_id)
    return SubscriptionResponse(
        is_premium=bool(subscription and subscription.is_premium),
        purchased_at=subscription.purchased_at if subscription else None,
        premium_cost=get_settings().premium_cost,
    )


@router.post("/purchase", response_model=PurchasePremiumResponse)
async def purchase_premium(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Spend coins on the premium tier."""
    try:
        result = await SubscriptionService(db).purchase_premium(user_id)
    except SubscriptionError as exc:
        raise HTTPException(status_code=PURCHASE_FAILURE_STATUS.get(exc.reason, 500), detail=exc.reason) from exc

    return PurchasePremiumResponse(
        success=True,
        is_premium=result.is_premium,
        purchased_at=result.purchased_at,
        cost=result.cost,
        new_balance=result.new_balance,
    )
