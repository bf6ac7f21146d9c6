"""
Tests for daily task progress through the ledger: counting, completion,
auto-claim and day rollover.
"""

import asyncio
import uuid

import pytest
from sqlalchemy import select

from coinledger.models.task_progress import TaskProgress
from coinledger.models.transaction import CoinTransaction
from coinledger.services.ledger_service import CoinLedgerService
from coinledger.services.task_service import TaskService
from coinledger.services.transaction_service import TransactionService


async def _daily_task_transactions(db_session, user_id):
    result = await db_session.execute(
        select(CoinTransaction).where(
            CoinTransaction.user_id == user_id,
            CoinTransaction.transaction_type == "daily_task",
        )
    )
    return list(result.scalars().all())


class TestScenarioA:

    @pytest.mark.asyncio
    async def test_five_messages_complete_and_auto_claim(self, db_session, task_factory, clock, user_id):
        """New user, 'send 5 messages' task, five increments: claimed once, balance 110."""
        task = await task_factory(task_type="send_messages", required_count=5, reward_coins=10)
        ledger = CoinLedgerService(db_session, clock=clock)

        state = await ledger.load_state(user_id)
        assert state.loaded
        assert state.balance == 100

        for call in range(1, 6):
            result = await ledger.update_task_progress(user_id, "send_messages")
            assert result.succeeded
            progress = (await TaskService(db_session).get_progress_for_day(user_id, clock()))[task.task_id]
            assert progress.current_count == call
            if call < 5:
                assert not progress.is_completed
                assert not progress.is_claimed

        assert result.completed_task_ids == [task.task_id]
        assert result.claimed_task_ids == [task.task_id]
        assert result.coins_awarded == 10
        assert progress.is_completed
        assert progress.is_claimed
        assert progress.completed_at is not None
        assert progress.claimed_at is not None

        account = await TransactionService(db_session).get_account(user_id)
        assert account.balance == 110
        assert account.total_earned == 10

        transactions = await _daily_task_transactions(db_session, user_id)
        assert len(transactions) == 1
        assert transactions[0].amount == 10
        assert transactions[0].description == f"Completed: {task.name}"


class TestProgressCounting:

    @pytest.mark.asyncio
    async def test_count_is_sum_of_increments_until_claimed(self, db_session, task_factory, clock, user_id):
        """Increments after the claim are ignored."""
        task = await task_factory(task_type="new_conversation", required_count=6, reward_coins=15)
        ledger = CoinLedgerService(db_session, clock=clock)

        increments = [2, 3, 4, 1, 5]
        for n in increments:
            await ledger.update_task_progress(user_id, "new_conversation", n)

        progress = (await TaskService(db_session).get_progress_for_day(user_id, clock()))[task.task_id]
        # The third call (2 + 3 + 4 = 9) completes and claims; later calls find it claimed
        assert progress.current_count == 9
        assert progress.is_claimed
        assert len(await _daily_task_transactions(db_session, user_id)) == 1

    @pytest.mark.asyncio
    async def test_completed_iff_count_reaches_required(self, db_session, task_factory, clock, user_id):
        task = await task_factory(task_type="send_messages", required_count=3)
        ledger = CoinLedgerService(db_session, clock=clock)
        ledger.settings = ledger.settings.model_copy(update={"auto_claim_task_rewards": False})

        for _ in range(5):
            await ledger.update_task_progress(user_id, "send_messages")
            progress = (await TaskService(db_session).get_progress_for_day(user_id, clock()))[task.task_id]
            assert progress.is_completed == (progress.current_count >= task.required_count)
            assert not progress.is_claimed

        assert progress.current_count == 5

    @pytest.mark.asyncio
    async def test_all_tasks_sharing_a_type_advance(self, db_session, task_factory, clock, user_id):
        short = await task_factory(task_type="send_messages", required_count=1, reward_coins=5)
        long = await task_factory(task_type="send_messages", required_count=3, reward_coins=20)
        other = await task_factory(task_type="login", required_count=1)
        ledger = CoinLedgerService(db_session, clock=clock)

        result = await ledger.update_task_progress(user_id, "send_messages")

        assert set(result.updated_task_ids) == {short.task_id, long.task_id}
        assert result.claimed_task_ids == [short.task_id]
        progress = await TaskService(db_session).get_progress_for_day(user_id, clock())
        assert progress[short.task_id].is_claimed
        assert progress[long.task_id].current_count == 1
        assert other.task_id not in progress

    @pytest.mark.asyncio
    async def test_inactive_tasks_are_ignored(self, db_session, task_factory, clock, user_id):
        await task_factory(task_type="login", is_active=False)
        ledger = CoinLedgerService(db_session, clock=clock)

        result = await ledger.update_task_progress(user_id, "login")

        assert result.succeeded
        assert result.updated_task_ids == []

    @pytest.mark.asyncio
    async def test_unknown_task_type_is_a_noop(self, db_session, task_factory, clock, user_id):
        await task_factory(task_type="login")
        ledger = CoinLedgerService(db_session, clock=clock)

        result = await ledger.update_task_progress(user_id, "write_review")

        assert result.succeeded
        assert result.updated_task_ids == []
        rows = await db_session.execute(select(TaskProgress).where(TaskProgress.user_id == user_id))
        assert rows.scalars().all() == []

    @pytest.mark.asyncio
    async def test_non_positive_increment_fails_softly(self, db_session, task_factory, clock, user_id):
        task = await task_factory(task_type="send_messages", required_count=2)
        ledger = CoinLedgerService(db_session, clock=clock)

        result = await ledger.update_task_progress(user_id, "send_messages", 0)

        assert not result.succeeded
        progress = await TaskService(db_session).get_progress_for_day(user_id, clock())
        assert task.task_id not in progress


class TestDayRollover:

    @pytest.mark.asyncio
    async def test_new_day_starts_from_zero(self, db_session, task_factory, clock, user_id):
        task = await task_factory(task_type="send_messages", required_count=2, reward_coins=10)
        ledger = CoinLedgerService(db_session, clock=clock)

        await ledger.update_task_progress(user_id, "send_messages", 2)
        day_one = clock()
        clock.advance()

        state = await ledger.load_state(user_id)
        assert task.task_id not in state.progress

        await ledger.update_task_progress(user_id, "send_messages")
        service = TaskService(db_session)
        assert (await service.get_progress_for_day(user_id, day_one))[task.task_id].is_claimed
        today = (await service.get_progress_for_day(user_id, clock()))[task.task_id]
        assert today.current_count == 1
        assert not today.is_completed

    @pytest.mark.asyncio
    async def test_same_task_claimable_again_next_day(self, db_session, task_factory, clock, user_id):
        await task_factory(task_type="login", required_count=1, reward_coins=10)
        ledger = CoinLedgerService(db_session, clock=clock)

        await ledger.update_task_progress(user_id, "login")
        clock.advance()
        await ledger.update_task_progress(user_id, "login")

        account = await TransactionService(db_session).get_account(user_id)
        assert account.balance == 120
        assert len(await _daily_task_transactions(db_session, user_id)) == 2


class TestConcurrentProgress:

    @pytest.mark.asyncio
    async def test_concurrent_increments_claim_exactly_once(self, session_factory, db_session, task_factory, clock,
                                                            user_id):
        task = await task_factory(task_type="send_messages", required_count=10, reward_coins=20)

        async def send_message():
            async with session_factory() as session:
                return await CoinLedgerService(session, clock=clock).update_task_progress(user_id, "send_messages")

        results = await asyncio.gather(*(send_message() for _ in range(12)))

        assert all(r.succeeded for r in results)
        assert sum(len(r.claimed_task_ids) for r in results) == 1

        async with session_factory() as check:
            progress = (await TaskService(check).get_progress_for_day(user_id, clock()))[task.task_id]
            assert progress.current_count == 10
            assert progress.is_claimed
            account = await TransactionService(check).get_account(user_id)
            assert account.balance == 120
            assert len(await _daily_task_transactions(check, user_id)) == 1

    @pytest.mark.asyncio
    async def test_users_are_independent(self, db_session, task_factory, clock):
        task = await task_factory(task_type="login")
        ledger = CoinLedgerService(db_session, clock=clock)
        alice, bob = uuid.uuid4(), uuid.uuid4()

        await ledger.update_task_progress(alice, "login")

        service = TaskService(db_session)
        assert task.task_id in await service.get_progress_for_day(alice, clock())
        assert task.task_id not in await service.get_progress_for_day(bob, clock())
