"""Premium subscription schemas."""
from coinledger.schemas.base import BaseSchema
from datetime import datetime
from typing import Optional


class SubscriptionResponse(BaseSchema):
    is_premium: bool
    purchased_at: Optional[datetime] = None
    premium_cost: int


class PurchasePremiumResponse(BaseSchema):
    """Response after buying premium."""
    success: bool
    is_premium: bool
    purchased_at: Optional[datetime] = None
    cost: int
    new_balance: int
