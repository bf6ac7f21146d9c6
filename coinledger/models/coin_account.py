"""Coin account model."""
from sqlalchemy import Column, Integer, DateTime
import uuid
from coinledger.database import Base
from coinledger.models.base import get_uuid_column, utc_now


class CoinAccount(Base):
    """A user's spendable coin balance."""
    __tablename__ = "user_coins"

    account_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    user_id = get_uuid_column(nullable=False, unique=True, index=True)
    balance = Column(Integer, nullable=False, default=0)
    total_earned = Column(Integer, nullable=False, default=0)  # Sum of positive credits only
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return f"<CoinAccount(user_id={self.user_id}, balance={self.balance}, total_earned={self.total_earned})>"
