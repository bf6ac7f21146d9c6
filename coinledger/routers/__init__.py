"""API routers."""
from coinledger.routers import coins, health, notifications, streak, subscription, tasks

__all__ = [
    "coins",
    "health",
    "notifications",
    "streak",
    "subscription",
    "tasks",
]
