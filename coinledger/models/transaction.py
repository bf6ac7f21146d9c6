"""Coin transaction ledger model."""
from sqlalchemy import Column, String, Integer, DateTime, Index
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class CoinTransaction(Base):
    """Append-only coin ledger entry."""
    __tablename__ = "coin_transactions"

    transaction_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # Negative for charges, positive for rewards
    transaction_type = Column(String(50), nullable=False, index=True)
    description = Column(String(255), nullable=True)
    balance_after = Column(Integer, nullable=True)  # For audit trail
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    __table_args__ = (
        Index("ix_coin_transactions_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return (f"<CoinTransaction(transaction_id={self.transaction_id}, amount={self.amount}, "
                f"type={self.transaction_type})>")
