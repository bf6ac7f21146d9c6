"""Utilities module - lock client."""
from coinledger.config import get_settings
from coinledger.utils.lock_client import LockClient

settings = get_settings()

# Create singleton instance
lock_client = LockClient(settings.redis_url if settings.redis_url else None)

__all__ = ["lock_client"]
