"""
API tests for the coin ledger endpoints.
"""

import uuid

import pytest
from sqlalchemy import text

from coinledger.services.task_seeder import ensure_default_tasks

INTERNAL_KEY = "test-internal-key"


@pytest.fixture
def headers(user_id):
    return {"X-User-Id": str(user_id)}


@pytest.fixture
async def seeded_tasks(db_session):
    await ensure_default_tasks(db_session)


class TestIdentity:

    @pytest.mark.asyncio
    async def test_missing_user_header(self, client):
        response = await client.get("/coins")
        assert response.status_code == 401
        assert response.json()["detail"] == "missing_credentials"

    @pytest.mark.asyncio
    async def test_malformed_user_header(self, client):
        response = await client.get("/coins", headers={"X-User-Id": "not-a-uuid"})
        assert response.status_code == 401
        assert response.json()["detail"] == "invalid_user_id"


class TestHealth:

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "connected"
        assert data["locks"] == "memory"


class TestCoinsApi:

    @pytest.mark.asyncio
    async def test_state_for_new_user(self, client, headers, seeded_tasks):
        response = await client.get("/coins", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["balance"] == 100
        assert data["total_earned"] == 0
        assert data["is_premium"] is False
        assert data["streak"]["current_streak"] == 0
        assert {t["name"] for t in data["tasks"]} == {"Daily Login", "Chatterbox", "Explorer", "Creator"}
        assert all(t["current_count"] == 0 for t in data["tasks"])

    @pytest.mark.asyncio
    async def test_add_coins_requires_internal_key(self, client, headers):
        response = await client.post(
            "/coins", headers=headers, json={"amount": 10, "transaction_type": "referral"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_add_coins_and_history(self, client, headers):
        response = await client.post(
            "/coins",
            headers={**headers, "X-Internal-Key": INTERNAL_KEY},
            json={"amount": 40, "transaction_type": "referral", "description": "Invited a friend"},
        )
        assert response.status_code == 200
        assert response.json()["balance_after"] == 140
        assert response.json()["transaction_type"] == "referral"

        history = await client.get("/coins/transactions", headers=headers)
        assert history.status_code == 200
        assert [t["amount"] for t in history.json()["transactions"]] == [40]

    @pytest.mark.asyncio
    async def test_add_coins_rejects_overdraft(self, client, headers):
        response = await client.post(
            "/coins",
            headers={**headers, "X-Internal-Key": INTERNAL_KEY},
            json={"amount": -1000, "transaction_type": "adjustment"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_add_coins_rejects_zero(self, client, headers):
        response = await client.post(
            "/coins",
            headers={**headers, "X-Internal-Key": INTERNAL_KEY},
            json={"amount": 0, "transaction_type": "adjustment"},
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Request validation failed"

    @pytest.mark.asyncio
    async def test_add_coins_survives_notification_failure(self, client, headers, db_session):
        await db_session.execute(text("DROP TABLE notifications"))
        await db_session.commit()

        response = await client.post(
            "/coins",
            headers={**headers, "X-Internal-Key": INTERNAL_KEY},
            json={"amount": 25, "transaction_type": "referral"},
        )

        assert response.status_code == 200
        assert response.json()["balance_after"] == 125


class TestTasksApi:

    @pytest.mark.asyncio
    async def test_login_progress_auto_claims(self, client, headers, seeded_tasks):
        response = await client.post("/tasks/progress", headers=headers, json={"task_type": "login"})

        assert response.status_code == 200
        data = response.json()
        assert data["coins_awarded"] == 10
        assert len(data["claimed_task_ids"]) == 1
        assert data["streak"] is None

        tasks = (await client.get("/tasks", headers=headers)).json()
        login = next(t for t in tasks["tasks"] if t["task_type"] == "login")
        assert login["is_completed"] and login["is_claimed"]
        assert tasks["completed_count"] == 1
        assert tasks["total_count"] == 4

        balance = (await client.get("/coins", headers=headers)).json()["balance"]
        assert balance == 110

    @pytest.mark.asyncio
    async def test_full_day_advances_streak(self, client, headers, seeded_tasks):
        for task_type, increment in [
            ("login", 1), ("send_messages", 10), ("new_conversation", 3), ("create_character", 1),
        ]:
            response = await client.post(
                "/tasks/progress", headers=headers, json={"task_type": task_type, "increment": increment},
            )
            assert response.status_code == 200

        assert response.json()["streak"]["current_streak"] == 1
        streak = (await client.get("/streak", headers=headers)).json()
        assert streak["current_streak"] == 1
        assert streak["longest_streak"] == 1

        check = (await client.post("/streak/check", headers=headers)).json()
        assert check["updated"] is False
        assert check["streak"]["current_streak"] == 1

        balance = (await client.get("/coins", headers=headers)).json()["balance"]
        assert balance == 100 + 10 + 20 + 15 + 25

    @pytest.mark.asyncio
    async def test_progress_validation(self, client, headers):
        response = await client.post("/tasks/progress", headers=headers, json={"task_type": "login", "increment": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_claim_errors(self, client, headers, seeded_tasks):
        tasks = (await client.get("/tasks", headers=headers)).json()["tasks"]
        chatterbox = next(t for t in tasks if t["task_type"] == "send_messages")
        login = next(t for t in tasks if t["task_type"] == "login")

        missing = await client.post(f"/tasks/{uuid.uuid4()}/claim", headers=headers)
        assert missing.status_code == 404

        await client.post("/tasks/progress", headers=headers, json={"task_type": "send_messages", "increment": 3})
        incomplete = await client.post(f"/tasks/{chatterbox['task_id']}/claim", headers=headers)
        assert incomplete.status_code == 400
        assert incomplete.json()["detail"] == "not_completed"

        await client.post("/tasks/progress", headers=headers, json={"task_type": "login"})
        claimed = await client.post(f"/tasks/{login['task_id']}/claim", headers=headers)
        assert claimed.status_code == 409


class TestSubscriptionApi:

    @pytest.mark.asyncio
    async def test_purchase_flow(self, client, headers):
        status = (await client.get("/subscription", headers=headers)).json()
        assert status == {"is_premium": False, "purchased_at": None, "premium_cost": 500}

        poor = await client.post("/subscription/purchase", headers=headers)
        assert poor.status_code == 400
        assert poor.json()["detail"] == "insufficient_balance"

        await client.post(
            "/coins",
            headers={**headers, "X-Internal-Key": INTERNAL_KEY},
            json={"amount": 450, "transaction_type": "referral"},
        )
        bought = await client.post("/subscription/purchase", headers=headers)
        assert bought.status_code == 200
        assert bought.json()["new_balance"] == 50
        assert bought.json()["is_premium"] is True

        again = await client.post("/subscription/purchase", headers=headers)
        assert again.status_code == 409

        state = (await client.get("/coins", headers=headers)).json()
        assert state["is_premium"] is True


class TestNotificationsApi:

    @pytest.mark.asyncio
    async def test_list_and_mark_read(self, client, headers, seeded_tasks):
        await client.post("/tasks/progress", headers=headers, json={"task_type": "login"})

        listing = (await client.get("/notifications", headers=headers)).json()
        assert listing["unread_count"] == 1
        note = listing["notifications"][0]
        assert note["title"] == "+10 Coins!"
        assert note["description"] == "Completed: Daily Login"

        read = await client.post(f"/notifications/{note['notification_id']}/read", headers=headers)
        assert read.status_code == 200
        assert read.json()["is_read"] is True

        unread = (await client.get("/notifications?unread_only=true", headers=headers)).json()
        assert unread["notifications"] == []
        assert unread["unread_count"] == 0

    @pytest.mark.asyncio
    async def test_cannot_read_someone_elses_notification(self, client, headers, seeded_tasks):
        await client.post("/tasks/progress", headers=headers, json={"task_type": "login"})
        note = (await client.get("/notifications", headers=headers)).json()["notifications"][0]

        other = {"X-User-Id": str(uuid.uuid4())}
        response = await client.post(f"/notifications/{note['notification_id']}/read", headers=other)
        assert response.status_code == 404
