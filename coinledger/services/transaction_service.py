"""Transaction service for atomic balance updates."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from uuid import UUID
import uuid
import logging

from coinledger.config import get_settings
from coinledger.models.coin_account import CoinAccount
from coinledger.models.transaction import CoinTransaction
from coinledger.utils import lock_client
from coinledger.utils.db_helpers import insert_if_absent
from coinledger.utils.exceptions import InsufficientBalanceError

logger = logging.getLogger(__name__)


def ledger_lock_name(user_id: UUID) -> str:
    """Name of the lock that serializes every balance change for one user."""
    return f"ledger:{user_id}"


class TransactionService:
    """Service for managing coin balances and the transaction ledger."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def get_account(self, user_id: UUID, for_update: bool = False) -> CoinAccount | None:
        """Load the coin account, re-reading the row even if it is already in the session."""
        stmt = (
            select(CoinAccount)
            .where(CoinAccount.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_account(self, user_id: UUID, for_update: bool = False) -> CoinAccount:
        """
        Return the user's coin account, creating it with the starting balance.

        The starting balance is a seed value, not a credit, so no transaction
        row is written and total_earned starts at zero.
        """
        account = await self.get_account(user_id, for_update=for_update)
        if account:
            return account

        inserted = await insert_if_absent(
            self.db,
            CoinAccount,
            ["user_id"],
            account_id=uuid.uuid4(),
            user_id=user_id,
            balance=self.settings.starting_balance,
            total_earned=0,
        )
        if inserted:
            logger.info(f"Created coin account for {user_id=} with balance {self.settings.starting_balance}")

        account = await self.get_account(user_id, for_update=for_update)
        if not account:
            raise RuntimeError(f"Coin account missing after create for {user_id}")
        return account

    async def create_transaction(
        self,
        user_id: UUID,
        amount: int,
        transaction_type: str,
        description: str | None = None,
        auto_commit: bool = True,
        skip_lock: bool = False,
    ) -> CoinTransaction:
        """
        Create transaction and update the user's balance atomically.

        Uses the per-user ledger lock to prevent lost updates (unless skip_lock=True).

        Args:
            user_id: User UUID
            amount: Amount (negative for charges, positive for rewards)
            transaction_type: Transaction type tag
            description: Human-readable reason shown in the history
            auto_commit: If True, commits immediately. If False, caller must commit.
            skip_lock: If True, assumes caller has already acquired the ledger lock.

        Returns:
            Created transaction

        Raises:
            InsufficientBalanceError: If balance would go negative
        """
        async def _create_transaction_impl():
            # Get current account with row lock
            account = await self.get_or_create_account(user_id, for_update=True)

            current_balance = account.balance
            new_balance = current_balance + amount

            # Check sufficient balance for negative transactions
            if new_balance < 0:
                raise InsufficientBalanceError(
                    f"Insufficient balance: {current_balance} + {amount} = {new_balance} < 0"
                )

            account.balance = new_balance
            if amount > 0:
                account.total_earned += amount

            transaction = CoinTransaction(
                transaction_id=uuid.uuid4(),
                user_id=user_id,
                amount=amount,
                transaction_type=transaction_type,
                description=description,
                balance_after=new_balance,
            )

            self.db.add(transaction)

            if auto_commit:
                await self.db.commit()
                await self.db.refresh(transaction)
            else:
                await self.db.flush()

            logger.info(
                f"Transaction created: user={user_id}, amount={amount}, "
                f"type={transaction_type}, new_balance={new_balance}, auto_commit={auto_commit}"
            )

            return transaction

        if skip_lock:
            return await _create_transaction_impl()
        else:
            async with lock_client.lock(
                ledger_lock_name(user_id),
                timeout=self.settings.ledger_lock_timeout_seconds,
                hold_timeout=self.settings.ledger_lock_hold_seconds,
            ):
                return await _create_transaction_impl()

    async def get_user_transactions(
        self,
        user_id: UUID,
        limit: int = 50,
        offset: int = 0,
        transaction_type: str | None = None,
    ) -> list[CoinTransaction]:
        """Get user transaction history, newest first."""
        stmt = select(CoinTransaction).where(CoinTransaction.user_id == user_id)
        if transaction_type:
            stmt = stmt.where(CoinTransaction.transaction_type == transaction_type)
        result = await self.db.execute(
            stmt
            .order_by(CoinTransaction.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
