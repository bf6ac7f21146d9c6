"""Daily task endpoints."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from coinledger.dependencies import get_current_user_id, get_ledger_service
from coinledger.schemas.streak import StreakUpdateResponse
from coinledger.schemas.task import (
    ClaimTaskRewardResponse,
    DailyTaskListResponse,
    DailyTaskResponse,
    TaskProgressRequest,
    TaskProgressResponse,
)
from coinledger.services.ledger_service import CoinLedgerService, LedgerState

logger = logging.getLogger(__name__)

router = APIRouter()

CLAIM_FAILURE_STATUS = {
    "not_found": 404,
    "not_completed": 400,
    "already_claimed": 409,
}


def build_task_responses(state: LedgerState) -> list[DailyTaskResponse]:
    """Merge active task definitions with the day's progress rows."""
    responses = []
    for task in state.tasks:
        progress = state.progress.get(task.task_id)
        responses.append(DailyTaskResponse(
            task_id=task.task_id,
            name=task.name,
            description=task.description,
            task_type=task.task_type,
            reward_coins=task.reward_coins,
            required_count=task.required_count,
            current_count=progress.current_count if progress else 0,
            is_completed=progress.is_completed if progress else False,
            is_claimed=progress.is_claimed if progress else False,
            completed_at=progress.completed_at if progress else None,
            claimed_at=progress.claimed_at if progress else None,
        ))
    return responses


async def load_state_or_503(ledger: CoinLedgerService, user_id: UUID) -> LedgerState:
    state = await ledger.load_state(user_id)
    if not state.loaded:
        raise HTTPException(status_code=503, detail="ledger_unavailable")
    return state


@router.get("", response_model=DailyTaskListResponse)
async def get_daily_tasks(
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Active tasks with today's progress."""
    state = await load_state_or_503(ledger, user_id)
    tasks = build_task_responses(state)
    return DailyTaskListResponse(
        day=state.day,
        tasks=tasks,
        completed_count=sum(1 for task in tasks if task.is_completed),
        total_count=len(tasks),
    )


@router.post("/progress", response_model=TaskProgressResponse)
async def update_task_progress(
    request: TaskProgressRequest,
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Record a progress event (login, message sent, conversation started, character created)."""
    result = await ledger.update_task_progress(user_id, request.task_type, request.increment)
    if not result.succeeded:
        raise HTTPException(status_code=503, detail="ledger_unavailable")

    return TaskProgressResponse(
        task_type=result.task_type,
        updated_task_ids=result.updated_task_ids,
        completed_task_ids=result.completed_task_ids,
        claimed_task_ids=result.claimed_task_ids,
        coins_awarded=result.coins_awarded,
        streak=StreakUpdateResponse.model_validate(result.streak) if result.streak else None,
    )


@router.post("/{task_id}/claim", response_model=ClaimTaskRewardResponse)
async def claim_task_reward(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    ledger: CoinLedgerService = Depends(get_ledger_service),
):
    """Claim a completed task's reward."""
    result = await ledger.claim_task_reward(user_id, task_id)
    if not result.success:
        status_code = CLAIM_FAILURE_STATUS.get(result.reason, 503)
        raise HTTPException(status_code=status_code, detail=result.reason)

    return ClaimTaskRewardResponse(
        success=True,
        task_id=result.task_id,
        reward_amount=result.reward_amount,
        new_balance=result.new_balance,
        streak=StreakUpdateResponse.model_validate(result.streak) if result.streak else None,
    )
