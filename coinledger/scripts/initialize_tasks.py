"""Script to ensure the default daily task catalogue exists."""
import asyncio
import logging
from sqlalchemy import select

from coinledger.database import AsyncSessionLocal
from coinledger.models.daily_task import DailyTask
from coinledger.services.task_seeder import ensure_default_tasks

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def initialize_daily_tasks() -> int:
    """Seed missing default tasks and print the resulting catalogue."""
    async with AsyncSessionLocal() as db:
        try:
            created = await ensure_default_tasks(db)

            result = await db.execute(select(DailyTask).order_by(DailyTask.created_at, DailyTask.name))
            tasks = list(result.scalars().all())

            logger.info("=== Summary ===")
            logger.info(f"Tasks created: {created}")
            for task in tasks:
                state = "active" if task.is_active else "inactive"
                logger.info(
                    f"{task.name} ({task.task_type}): {task.required_count}x for {task.reward_coins} coins [{state}]"
                )
            return created

        except Exception as e:
            logger.error(f"Error initializing daily tasks: {e}")
            await db.rollback()
            raise


if __name__ == "__main__":
    asyncio.run(initialize_daily_tasks())
