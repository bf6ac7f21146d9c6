"""Auto-seed the default daily task catalogue."""
from coinledger.database import AsyncSessionLocal
from coinledger.models.base import TaskType
from coinledger.models.daily_task import DailyTask
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

logger = logging.getLogger(__name__)

DEFAULT_DAILY_TASKS = [
    {
        "name": "Daily Login",
        "description": "Log in to the platform",
        "task_type": TaskType.LOGIN.value,
        "required_count": 1,
        "reward_coins": 10,
    },
    {
        "name": "Chatterbox",
        "description": "Send 10 messages to any character",
        "task_type": TaskType.SEND_MESSAGES.value,
        "required_count": 10,
        "reward_coins": 20,
    },
    {
        "name": "Explorer",
        "description": "Start 3 new conversations",
        "task_type": TaskType.NEW_CONVERSATION.value,
        "required_count": 3,
        "reward_coins": 15,
    },
    {
        "name": "Creator",
        "description": "Create a new character",
        "task_type": TaskType.CREATE_CHARACTER.value,
        "required_count": 1,
        "reward_coins": 25,
    },
]


async def ensure_default_tasks(db: AsyncSession) -> int:
    """Insert any default task missing from the catalogue.

    A task counts as present when a row with the same name and task type
    exists, active or not, so deactivated defaults stay deactivated.

    Returns:
        Number of tasks created.
    """
    result = await db.execute(select(DailyTask.name, DailyTask.task_type))
    existing = {(name, task_type) for name, task_type in result.all()}

    created = 0
    for task_def in DEFAULT_DAILY_TASKS:
        if (task_def["name"], task_def["task_type"]) in existing:
            continue
        db.add(DailyTask(is_active=True, **task_def))
        created += 1

    if created:
        await db.commit()
        logger.info(f"Seeded {created} default daily tasks")
    else:
        logger.info("Default daily tasks already present")
    return created


async def seed_default_tasks() -> int:
    """Seed the catalogue using a fresh session. Runs on application startup."""
    async with AsyncSessionLocal() as db:
        return await ensure_default_tasks(db)
