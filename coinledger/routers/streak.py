"""Streak endpoints."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from coinledger.dependencies import get_current_user_id, get_ledger_service
from coinledger.routers.tasks import load_state_or_503
from coinledger.schemas.streak import StreakCheckResponse, StreakResponse, StreakUpdateResponse
from coinledger.services.ledger_service import CoinLedgerService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=StreakResponse)
async def get_streak(
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    state = await load_state_or_503(ledger, user_id)
    return StreakResponse(
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        last_completed_date=state.last_completed_date,
        weekly_bonus_last_claimed=state.weekly_bonus_last_claimed,
    )


@router.post("/check", response_model=StreakCheckResponse)
async def check_streak(
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Advance the streak if every daily task is completed and claimed today."""
    update = await ledger.check_and_update_streak(user_id)
    state = await load_state_or_503(ledger, user_id)
    return StreakCheckResponse(
        updated=update is not None,
        update=StreakUpdateResponse.model_validate(update) if update else None,
        streak=StreakResponse(
            current_streak=state.current_streak,
            longest_streak=state.longest_streak,
            last_completed_date=state.last_completed_date,
            weekly_bonus_last_claimed=state.weekly_bonus_last_claimed,
        ),
    )
