"""Application configuration management."""
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from sqlalchemy.engine.url import make_url, URL
from typing import Optional
import logging

SQLITE_LOCAL_URL = "sqlite+aiosqlite:///./coinledger.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = SQLITE_LOCAL_URL
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Redis (optional, falls back to in-process locks)
    redis_url: str = ""

    # Application
    environment: str = "development"
    frontend_url: str = "http://localhost:5173"

    # Coin economy (all values in whole coins)
    starting_balance: int = 100  # Seed balance for a lazily created coin account
    weekly_bonus_amount: int = 100  # Awarded when the streak reaches a multiple of the interval
    streak_bonus_interval_days: int = 7
    premium_cost: int = 500
    auto_claim_task_rewards: bool = True  # Claim rewards as soon as a task completes
    seed_default_tasks: bool = True  # Ensure the default daily task catalogue exists on startup

    # Internal endpoints (POST /coins); empty disables them
    internal_api_key: str = ""

    # Locking
    ledger_lock_timeout_seconds: int = 10  # How long to wait for the per-user lock
    ledger_lock_hold_seconds: int = 60  # Redis lock expiry if a holder never releases it

    @model_validator(mode="after")
    def validate_all_config(self):
        """Validate economy configuration and normalize Postgres URLs."""
        logger = logging.getLogger(__name__)

        if self.starting_balance < 0:
            raise ValueError("starting_balance must not be negative")

        if self.weekly_bonus_amount < 0:
            raise ValueError("weekly_bonus_amount must not be negative")

        if self.streak_bonus_interval_days < 1:
            raise ValueError("streak_bonus_interval_days must be at least 1 day")

        if self.premium_cost < 1:
            raise ValueError("premium_cost must be at least 1 coin")

        if self.ledger_lock_timeout_seconds < 1 or self.ledger_lock_timeout_seconds > 300:
            raise ValueError("ledger_lock_timeout_seconds must be between 1 and 300")

        if self.ledger_lock_hold_seconds < self.ledger_lock_timeout_seconds:
            raise ValueError("ledger_lock_hold_seconds must not be shorter than ledger_lock_timeout_seconds")

        url = self.database_url
        if not url:
            logger.warning("Empty DATABASE_URL, using SQLite fallback")
            self.database_url = SQLITE_LOCAL_URL
            return self

        parsed: Optional[URL] = None
        try:
            parsed = make_url(url)
        except Exception as e:  # pragma: no cover - defensive fallback
            logger.error(f"Failed to parse DATABASE_URL: {e}")
            self.database_url = SQLITE_LOCAL_URL
            return self

        drivername = parsed.drivername
        if drivername.startswith("postgres") and "+asyncpg" not in drivername:
            parsed = parsed.set(drivername="postgresql+asyncpg")
            logger.info(f"Driver normalized: {drivername} -> {parsed.drivername}")

        # render_as_string re-encodes special characters in the password
        self.database_url = parsed.render_as_string(hide_password=False)
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
