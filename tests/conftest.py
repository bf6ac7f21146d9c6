"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Point the application at a throwaway database and keep startup side effects off
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["REDIS_URL"] = ""
os.environ["SEED_DEFAULT_TASKS"] = "false"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"

from coinledger.database import Base
import coinledger.models  # noqa: F401
from coinledger.models.daily_task import DailyTask


class FixedClock:
    """Injectable clock for the ledger; advance it to move to another UTC day."""

    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day

    def advance(self, days: int = 1) -> date:
        self.day = self.day + timedelta(days=days)
        return self.day


@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database per test with every ledger table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest.fixture
def clock():
    return FixedClock(date(2025, 3, 3))


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
async def task_factory(db_session):
    """Factory for creating daily task definitions."""

    async def _create_task(
        task_type: str = "send_messages",
        required_count: int = 1,
        reward_coins: int = 10,
        name: str | None = None,
        is_active: bool = True,
    ) -> DailyTask:
        task = DailyTask(
            task_id=uuid.uuid4(),
            name=name or f"{task_type} x{required_count} {uuid.uuid4().hex[:6]}",
            description=f"Do {task_type} {required_count} times",
            task_type=task_type,
            required_count=required_count,
            reward_coins=reward_coins,
            is_active=is_active,
        )
        db_session.add(task)
        await db_session.commit()
        return task

    return _create_task


@pytest.fixture
async def test_app(session_factory):
    """Create test app with database override."""
    from coinledger.main import app
    from coinledger.database import get_db

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac
