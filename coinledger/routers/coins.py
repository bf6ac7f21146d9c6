"""Coin balance and transaction history endpoints."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.database import get_db
from coinledger.dependencies import get_current_user_id, get_ledger_service, require_internal_key
from coinledger.routers.tasks import build_task_responses, load_state_or_503
from coinledger.schemas.coins import (
    AddCoinsRequest,
    CoinTransactionResponse,
    LedgerStateResponse,
    TransactionListResponse,
)
from coinledger.schemas.streak import StreakResponse
from coinledger.services.ledger_service import CoinLedgerService
from coinledger.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=LedgerStateResponse)
async def get_ledger_state(
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Balance, lifetime earnings, premium flag, streak and today's tasks."""
    state = await load_state_or_503(ledger, user_id)
    return LedgerStateResponse(
        user_id=state.user_id,
        day=state.day,
        balance=state.balance,
        total_earned=state.total_earned,
        is_premium=state.is_premium,
        streak=StreakResponse(
            current_streak=state.current_streak,
            longest_streak=state.longest_streak,
            last_completed_date=state.last_completed_date,
            weekly_bonus_last_claimed=state.weekly_bonus_last_claimed,
        ),
        tasks=build_task_responses(state),
    )


@router.get("/transactions", response_model=TransactionListResponse)
async def get_transactions(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Transaction history, newest first."""
    transactions = await TransactionService(db).get_user_transactions(user_id, limit=limit, offset=offset)
    return TransactionListResponse(
        transactions=[CoinTransactionResponse.model_validate(txn) for txn in transactions],
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=CoinTransactionResponse, dependencies=[Depends(require_internal_key)])
async def add_coins(
    request: AddCoinsRequest,
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Credit or debit the user's balance. Internal callers only."""
    transaction = await ledger.add_coins(user_id, request.amount, request.transaction_type, request.description)
    if transaction is None:
        raise HTTPException(status_code=400, detail="transaction_rejected")
    return CoinTransactionResponse.model_validate(transaction)
