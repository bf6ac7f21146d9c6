"""Streak-related Pydantic schemas."""
from coinledger.schemas.base import BaseSchema
from datetime import date
from typing import Optional


class StreakResponse(BaseSchema):
    """Current streak record."""
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[date] = None
    weekly_bonus_last_claimed: Optional[date] = None


class StreakUpdateResponse(BaseSchema):
    """Streak change applied by a check."""
    previous_streak: int
    current_streak: int
    longest_streak: int
    last_completed_date: date
    bonus_amount: int = 0


class StreakCheckResponse(BaseSchema):
    updated: bool
    update: Optional[StreakUpdateResponse] = None
    streak: StreakResponse
