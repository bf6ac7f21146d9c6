"""Daily task Pydantic schemas."""
from coinledger.schemas.base import BaseSchema
from coinledger.schemas.streak import StreakUpdateResponse
from datetime import date, datetime
from pydantic import Field
from typing import Optional
from uuid import UUID


class DailyTaskResponse(BaseSchema):
    """An active task merged with the user's progress for the day."""
    task_id: UUID
    name: str
    description: str
    task_type: str
    reward_coins: int
    required_count: int
    current_count: int = 0
    is_completed: bool = False
    is_claimed: bool = False
    completed_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None


class DailyTaskListResponse(BaseSchema):
    day: date
    tasks: list[DailyTaskResponse]
    completed_count: int
    total_count: int


class TaskProgressRequest(BaseSchema):
    """Progress event raised by a calling page."""
    task_type: str = Field(..., min_length=1, max_length=50)
    increment: int = Field(1, ge=1, le=1000)


class TaskProgressResponse(BaseSchema):
    task_type: str
    updated_task_ids: list[UUID]
    completed_task_ids: list[UUID]
    claimed_task_ids: list[UUID]
    coins_awarded: int
    streak: Optional[StreakUpdateResponse] = None


class ClaimTaskRewardResponse(BaseSchema):
    """Response after claiming a daily task reward."""
    success: bool
    task_id: UUID
    reward_amount: int
    new_balance: Optional[int] = None
    streak: Optional[StreakUpdateResponse] = None
