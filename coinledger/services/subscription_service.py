"""Premium subscription purchase flow."""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.config import get_settings
from coinledger.models.base import NotificationType, TransactionType
from coinledger.models.subscription import UserSubscription
from coinledger.services.notification_service import NotificationService
from coinledger.services.transaction_service import TransactionService, ledger_lock_name
from coinledger.utils import lock_client
from coinledger.utils.db_helpers import insert_if_absent
from coinledger.utils.exceptions import InsufficientBalanceError

logger = logging.getLogger(__name__)

PREMIUM_PURCHASE_DESCRIPTION = "Premium subscription purchase"


class SubscriptionError(RuntimeError):
    """Raised when a premium purchase fails.

    ``reason`` is ``already_premium``, ``insufficient_balance`` or ``purchase_failed``.
    """

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason)


@dataclass
class PurchaseResult:
    is_premium: bool
    purchased_at: Optional[datetime]
    cost: int
    new_balance: int


class SubscriptionService:
    """Service for reading and purchasing the premium tier."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def get_subscription(self, user_id: UUID) -> Optional[UserSubscription]:
        result = await self.db.execute(
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def is_premium(self, user_id: UUID) -> bool:
        subscription = await self.get_subscription(user_id)
        return bool(subscription and subscription.is_premium)

    async def purchase_premium(self, user_id: UUID) -> PurchaseResult:
        """
        Spend the premium cost and activate premium for the user.

        The balance check and the debit happen under the user's ledger lock,
        so the cost can never be deducted twice or take the balance negative.

        Raises:
            SubscriptionError: If the user is already premium, cannot afford
                it, or the purchase fails. Nothing is persisted in that case.
        """
        cost = self.settings.premium_cost
        transaction_service = TransactionService(self.db)
        try:
            async with lock_client.lock(
                ledger_lock_name(user_id),
                timeout=self.settings.ledger_lock_timeout_seconds,
                hold_timeout=self.settings.ledger_lock_hold_seconds,
            ):
                if await self.is_premium(user_id):
                    raise SubscriptionError("already_premium", "User already has premium")

                transaction = await transaction_service.create_transaction(
                    user_id,
                    -cost,
                    TransactionType.PURCHASE.value,
                    PREMIUM_PURCHASE_DESCRIPTION,
                    auto_commit=False,
                    skip_lock=True,
                )

                await insert_if_absent(
                    self.db,
                    UserSubscription,
                    ["user_id"],
                    subscription_id=uuid.uuid4(),
                    user_id=user_id,
                    is_premium=False,
                )
                subscription = await self.get_subscription(user_id)
                subscription.is_premium = True
                subscription.purchased_at = datetime.now(UTC)

                await self.db.commit()
        except SubscriptionError:
            await self.db.rollback()
            raise
        except InsufficientBalanceError as exc:
            await self.db.rollback()
            logger.info(f"Premium purchase rejected for {user_id=}: {exc}")
            raise SubscriptionError("insufficient_balance", "Not enough coins for premium") from exc
        except Exception as exc:
            await self.db.rollback()
            logger.exception(f"Premium purchase failed for {user_id=}")
            raise SubscriptionError("purchase_failed", "Premium purchase failed") from exc

        result = PurchaseResult(
            is_premium=subscription.is_premium,
            purchased_at=subscription.purchased_at,
            cost=cost,
            new_balance=transaction.balance_after,
        )
        logger.info(f"Premium purchased by {user_id=} for {cost} coins, new balance {result.new_balance}")

        await NotificationService(self.db).notify(
            user_id,
            NotificationType.PREMIUM.value,
            "Welcome to Premium!",
            f"{cost} coins spent on premium",
        )

        return result
