"""Coin balance and transaction schemas."""
from coinledger.schemas.base import BaseSchema
from coinledger.schemas.streak import StreakResponse
from coinledger.schemas.task import DailyTaskResponse
from datetime import date, datetime
from pydantic import Field, field_validator
from typing import Optional
from uuid import UUID


class LedgerStateResponse(BaseSchema):
    """Everything a page needs to render coins, tasks and streak."""
    user_id: UUID
    day: date
    balance: int
    total_earned: int
    is_premium: bool
    streak: StreakResponse
    tasks: list[DailyTaskResponse]


class CoinTransactionResponse(BaseSchema):
    transaction_id: UUID
    amount: int
    transaction_type: str
    description: Optional[str] = None
    balance_after: Optional[int] = None
    created_at: datetime


class TransactionListResponse(BaseSchema):
    transactions: list[CoinTransactionResponse]
    limit: int
    offset: int


class AddCoinsRequest(BaseSchema):
    """Internal credit or debit."""
    amount: int
    transaction_type: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=255)

    @field_validator("amount")
    @classmethod
    def amount_not_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("amount must not be zero")
        return value
