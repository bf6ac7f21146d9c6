"""
Tests for reward notifications.
"""

import uuid

import pytest

from coinledger.services.notification_service import NotificationService


@pytest.fixture
def notifications(db_session):
    return NotificationService(db_session)


class TestNotify:

    @pytest.mark.asyncio
    async def test_notify_stores_unread(self, notifications, user_id):
        note = await notifications.notify(user_id, "task_reward", "+10 Coins!", "Completed: Daily Login")

        assert note is not None
        assert note.notification_id is not None
        assert not note.is_read
        assert await notifications.count_unread(user_id) == 1

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, notifications, user_id):
        await notifications.notify(user_id, "streak", "1-day streak!")
        await notifications.notify(uuid.uuid4(), "streak", "1-day streak!")

        listed = await notifications.list_notifications(user_id)

        assert len(listed) == 1
        assert listed[0].user_id == user_id

    @pytest.mark.asyncio
    async def test_limit_is_applied(self, notifications, user_id):
        for amount in (10, 20, 30):
            await notifications.notify(user_id, "task_reward", f"+{amount} Coins!")

        assert len(await notifications.list_notifications(user_id, limit=2)) == 2
        assert len(await notifications.list_notifications(user_id, limit=0)) == 1


class TestMarkRead:

    @pytest.mark.asyncio
    async def test_mark_read_updates_unread_views(self, notifications, user_id):
        first = await notifications.notify(user_id, "task_reward", "+10 Coins!")
        await notifications.notify(user_id, "task_reward", "+20 Coins!")

        read = await notifications.mark_read(user_id, first.notification_id)

        assert read.is_read
        assert await notifications.count_unread(user_id) == 1
        unread = await notifications.list_notifications(user_id, unread_only=True)
        assert [n.title for n in unread] == ["+20 Coins!"]

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, notifications, user_id):
        note = await notifications.notify(user_id, "premium", "Welcome to Premium!")

        await notifications.mark_read(user_id, note.notification_id)
        again = await notifications.mark_read(user_id, note.notification_id)

        assert again.is_read
        assert await notifications.count_unread(user_id) == 0

    @pytest.mark.asyncio
    async def test_other_users_notification_not_found(self, notifications, user_id):
        note = await notifications.notify(user_id, "premium", "Welcome to Premium!")

        assert await notifications.mark_read(uuid.uuid4(), note.notification_id) is None
        assert await notifications.mark_read(user_id, uuid.uuid4()) is None
        assert await notifications.count_unread(user_id) == 1
