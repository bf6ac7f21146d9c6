"""Tests for response serialization."""
import uuid
from datetime import date, datetime, timedelta, timezone

from coinledger.schemas.coins import CoinTransactionResponse
from coinledger.schemas.streak import StreakResponse


def _transaction(created_at):
    return CoinTransactionResponse(
        transaction_id=uuid.uuid4(),
        amount=10,
        transaction_type="daily_task",
        balance_after=110,
        created_at=created_at,
    )


class TestTimestampSerialization:

    def test_naive_timestamps_are_utc(self):
        data = _transaction(datetime(2025, 3, 3, 10, 0, 0)).model_dump()
        assert data["created_at"] == "2025-03-03T10:00:00Z"

    def test_offset_timestamps_are_converted(self):
        created_at = datetime(2025, 3, 3, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert _transaction(created_at).model_dump()["created_at"] == "2025-03-03T10:00:00Z"

    def test_days_are_iso_dates(self):
        streak = StreakResponse(
            current_streak=3,
            longest_streak=5,
            last_completed_date=date(2025, 3, 3),
            weekly_bonus_last_claimed=None,
        )
        data = streak.model_dump()
        assert data["last_completed_date"] == "2025-03-03"
        assert data["weekly_bonus_last_claimed"] is None
